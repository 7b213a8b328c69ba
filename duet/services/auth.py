"""Account service: sign-up and sign-in against the provider's account table."""

from dataclasses import dataclass
from datetime import datetime

import bcrypt
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from duet.errors import ProviderError
from duet.models.account import Account


@dataclass
class AuthResult:
    """Result of an authentication attempt."""

    success: bool
    error: str | None = None
    user_id: str | None = None
    email: str | None = None


class AuthService:
    """Handles account registration and authentication."""

    def sign_up(self, db: Session, email: str, password: str) -> AuthResult:
        """Create an account. Returns AuthResult with success/error."""
        try:
            existing = db.query(Account).filter(func.lower(Account.email) == email.strip().lower()).first()
            if existing:
                return AuthResult(success=False, error="Email already registered")

            password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
            account = Account(email=email.lower().strip(), password_hash=password_hash)
            db.add(account)
            db.commit()
            db.refresh(account)
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e

        return AuthResult(success=True, user_id=account.id, email=account.email)

    def sign_in(self, db: Session, email: str, password: str) -> AuthResult:
        """Authenticate an account by email and password."""
        try:
            account = db.query(Account).filter(func.lower(Account.email) == email.strip().lower()).first()
            if not account:
                return AuthResult(success=False, error="Invalid email or password")

            if not bcrypt.checkpw(password.encode("utf-8"), account.password_hash.encode("utf-8")):
                return AuthResult(success=False, error="Invalid email or password")

            account.last_sign_in_at = datetime.utcnow()
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise ProviderError(str(e)) from e

        return AuthResult(success=True, user_id=account.id, email=account.email)


_auth_service: AuthService | None = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
