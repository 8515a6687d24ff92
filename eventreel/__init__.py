"""Eventreel - event invitations with invitee video uploads."""
