"""Business-logic services."""
