"""JWT Token Service."""

from datetime import datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from duet.config import get_settings

GATE_SUBJECT = "shared-passphrase"


class JWTService:
    """Handles session and gate token creation and validation."""

    def __init__(self) -> None:
        settings = get_settings()
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES

    def create_token(self, user_id: str, email: str) -> str:
        """Create a session token for the given account."""
        expire = datetime.utcnow() + timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": user_id,
            "email": email,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_gate_token(self) -> str:
        """Create a token recording that the shared passphrase was accepted."""
        expire = datetime.utcnow() + timedelta(minutes=self.expire_minutes)
        return jwt.encode({"sub": GATE_SUBJECT, "exp": expire}, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> dict[str, Any] | None:
        """Decode and validate a JWT token. Returns None if invalid."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def is_gate_token(self, token: str) -> bool:
        payload = self.decode_token(token)
        return payload is not None and payload.get("sub") == GATE_SUBJECT


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService()
    return _jwt_service
