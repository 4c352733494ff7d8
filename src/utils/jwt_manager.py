"""Session token issuance and validation.

Tokens are stateless JWTs: validity is decided by signature, issuer,
audience and expiry alone. Nothing is stored server side, so a token stays
usable until it expires even after a refresh or logout.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

import pytz
from jose import JWTError, jwt
from pydantic import ValidationError

from core.exceptions import ConfigurationError, InvalidTokenError
from schemas.auth import TokenClaims
from schemas.user import User

logger = logging.getLogger(__name__)


class JwtManager:
    """Issues and validates signed session tokens."""

    def __init__(
        self,
        secret_key: Optional[str],
        algorithm: str = "HS256",
        expire_minutes: int = 60,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        """Initialize JwtManager.

        Args:
            secret_key: Signing key. When missing, issuing raises and every
                token is rejected.
            algorithm: JWS algorithm name.
            expire_minutes: Token lifetime.
            issuer: Optional issuer claim, enforced on validation when set.
            audience: Optional audience claim, enforced on validation when set.
        """
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes
        self.issuer = issuer
        self.audience = audience

    def create_access_token(self, user: User) -> str:
        """Create a signed token carrying the user's identity claims.

        Args:
            user: User the token is issued to.

        Returns:
            Encoded JWT token string.

        Raises:
            ConfigurationError: If no secret key is configured.
        """
        if not self.secret_key:
            raise ConfigurationError("JWT_SECRET_KEY is not set; cannot issue tokens.")

        now = datetime.now(pytz.utc)
        expire = now + timedelta(minutes=self.expire_minutes)
        to_encode = {
            "sub": user.id,
            "username": user.username,
            "email": user.email,
            "role": user.role.value,
            "iat": int(now.timestamp()),
            "exp": int(expire.timestamp()),
        }
        if self.issuer:
            to_encode["iss"] = self.issuer
        if self.audience:
            to_encode["aud"] = self.audience
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def validate_token(self, token: str) -> Optional[TokenClaims]:
        """Verify a token and return its claims.

        Args:
            token: Encoded JWT.

        Returns:
            TokenClaims if the token is well formed, correctly signed and not
            expired; None otherwise.
        """
        if not self.secret_key or not token:
            return None
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience,
                issuer=self.issuer,
            )
            return TokenClaims.model_validate(payload)
        except (JWTError, ValidationError) as e:
            logger.debug("Token rejected: %s", e)
            return None

    def is_token_expired(self, token: str) -> bool:
        """Check the expiry claim without verifying the signature.

        Tokens that cannot be parsed or carry no expiry count as expired.
        """
        try:
            expires_at = self.get_token_expiration(token)
        except InvalidTokenError:
            return True
        return expires_at <= datetime.now(pytz.utc)

    def get_token_expiration(self, token: str) -> datetime:
        """Read the expiry claim without verifying the signature.

        Args:
            token: Encoded JWT.

        Returns:
            Expiry as an aware UTC datetime.

        Raises:
            InvalidTokenError: If the token is malformed or has no usable expiry.
        """
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise InvalidTokenError("Malformed token") from e

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or isinstance(exp, bool):
            raise InvalidTokenError("Token has no expiry")
        try:
            return datetime.fromtimestamp(exp, pytz.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidTokenError("Token expiry out of range") from e
