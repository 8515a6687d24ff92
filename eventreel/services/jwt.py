"""JWT Token Service."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from eventreel.config import get_settings


class JWTService:
    """Handles JWT token creation and validation.

    The issuer claim carries the user id; username and email travel as custom claims.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 1440) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_token(self, user_id: str, username: str, email: str) -> str:
        """Create a JWT token for the given user."""
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        payload = {
            "iss": user_id,
            "username": username,
            "email": email,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. Returns None if invalid."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        if not payload.get("iss"):
            return None
        return payload


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        settings = get_settings()
        _jwt_service = JWTService(settings.JWT_SECRET_KEY, settings.JWT_ALGORITHM, settings.JWT_EXPIRE_MINUTES)
    return _jwt_service
