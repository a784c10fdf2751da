"""
Admin Authentication Service

Guards the authoring and calendar endpoints. A single operator account is
configured through the environment; its password is held as a bcrypt hash.
Callers authenticate either with HTTP Basic credentials on every request or
by exchanging them once for a short-lived JWT.
"""

import datetime
import hmac
from typing import Any, Dict, Optional

import bcrypt
import jwt

from ..utils.game_logger import game_logger

TOKEN_ALGORITHM = "HS256"
TOKEN_SUBJECT = "admin"


class AdminAuthService:
    """
    Authentication service for the admin operator.
    """

    def __init__(self, username: str, password_hash: str, jwt_secret: str,
                 token_expiration_minutes: int = 60):
        """
        Initialize the service with the operator's credentials.

        Args:
            username: Admin username
            password_hash: bcrypt hash of the admin password
            jwt_secret: Secret key for JWT token generation
            token_expiration_minutes: Lifetime of issued tokens
        """
        self.username = username
        self.password_hash = password_hash
        self.jwt_secret = jwt_secret
        self.token_expiration_minutes = token_expiration_minutes

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password as string
        """
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_credentials(self, username: Optional[str], password: Optional[str]) -> bool:
        """Check a username/password pair against the configured operator."""
        if not username or not password:
            return False
        if not hmac.compare_digest(username.encode('utf-8'), self.username.encode('utf-8')):
            return False
        try:
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        except ValueError:
            game_logger.logger.error("Configured admin password hash is not a valid bcrypt hash")
            return False

    def login(self, username: str, password: str) -> Dict[str, Any]:
        """
        Exchange admin credentials for a bearer token.

        Returns:
            Dictionary with success status and token or error
        """
        if not self.verify_credentials(username, password):
            return {"success": False, "error": "Invalid username or password"}

        now = datetime.datetime.now(datetime.timezone.utc)
        expires_at = now + datetime.timedelta(minutes=self.token_expiration_minutes)
        token_payload = {
            "sub": TOKEN_SUBJECT,
            "username": self.username,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(token_payload, self.jwt_secret, algorithm=TOKEN_ALGORITHM)
        return {
            "success": True,
            "token": token,
            "expires_at": expires_at.isoformat(),
        }

    def verify_token(self, token: str) -> Dict[str, Any]:
        """
        Verify and decode an admin JWT token.

        Returns:
            Dictionary with success status and admin data or error
        """
        if not token:
            return {"success": False, "error": "Token is required"}
        try:
            payload = jwt.decode(token, self.jwt_secret, algorithms=[TOKEN_ALGORITHM])
        except jwt.ExpiredSignatureError:
            return {"success": False, "error": "Token has expired"}
        except jwt.InvalidTokenError:
            return {"success": False, "error": "Invalid token"}

        if payload.get("sub") != TOKEN_SUBJECT or payload.get("username") != self.username:
            return {"success": False, "error": "Invalid token payload"}

        return {"success": True, "admin": {"username": self.username}}


# Global service instance
_admin_auth_service = None


def get_admin_auth_service() -> Optional[AdminAuthService]:
    """Get the global admin auth service instance."""
    return _admin_auth_service


def initialize_admin_auth_service(username: str, password: Optional[str] = None,
                                  password_hash: Optional[str] = None,
                                  jwt_secret: Optional[str] = None,
                                  token_expiration_minutes: int = 60) -> Optional[AdminAuthService]:
    """
    Initialize the global admin auth service instance.

    A plain password is hashed once at startup; a pre-computed bcrypt hash
    takes precedence when both are configured. Without credentials the admin
    endpoints stay locked.
    """
    global _admin_auth_service
    if not username or not (password or password_hash) or not jwt_secret:
        game_logger.logger.warning("Admin credentials or JWT secret not configured; admin API disabled")
        _admin_auth_service = None
        return None

    if not password_hash:
        password_hash = AdminAuthService.hash_password(password)

    _admin_auth_service = AdminAuthService(username, password_hash, jwt_secret, token_expiration_minutes)
    return _admin_auth_service
