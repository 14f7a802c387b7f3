# ==============================================================================
# SECURITY MODULE - JWT Authentication
# ==============================================================================
# Token creation and validation bound to the TOKEN_CONFIGURATION section
# ==============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, Field

from improved_api.core.exceptions import InvalidTokenError, TokenExpiredError
from improved_api.core.settings import TokenConfiguration


class AccessToken(BaseModel):
    """Token response returned to authenticated clients."""

    authenticated: bool = Field(True, description="Whether a token was issued")
    created: datetime = Field(..., description="Issue timestamp (UTC)")
    expiration: datetime = Field(..., description="Expiry timestamp (UTC)")
    access_token: str = Field(..., description="Encoded JWT")
    token_type: str = Field("bearer", description="Authorization scheme")


class SigningConfigurations:
    """
    Signing credentials derived from the token configuration.

    Attributes:
        key: Symmetric signing key
        algorithm: JWT algorithm name
    """

    def __init__(self, token_configuration: TokenConfiguration) -> None:
        self.key = token_configuration.SECRET_KEY
        self.algorithm = token_configuration.ALGORITHM

    def __repr__(self) -> str:
        return f"SigningConfigurations(algorithm='{self.algorithm}')"


class TokenService:
    """
    Issue and validate bearer tokens.

    Validation checks the signing key, audience, issuer and lifetime
    with zero clock skew.

    Example:
        >>> service = TokenService(token_configuration)
        >>> token = service.create_token("user-1")
        >>> service.decode_token(token.access_token)["sub"]
        'user-1'
    """

    def __init__(
        self,
        token_configuration: TokenConfiguration,
        signing_configurations: Optional[SigningConfigurations] = None,
    ) -> None:
        self.configuration = token_configuration
        self.signing = signing_configurations or SigningConfigurations(token_configuration)

    def create_token(
        self,
        subject: Union[str, Any],
        claims: Optional[Dict[str, Any]] = None,
        expires_in: Optional[timedelta] = None,
    ) -> AccessToken:
        """
        Create a signed access token.

        Args:
            subject: Token subject (usually the user identifier)
            claims: Extra claims to embed
            expires_in: Custom lifetime (defaults to SECONDS)

        Returns:
            AccessToken with the encoded JWT and its validity window
        """
        created = datetime.now(timezone.utc).replace(microsecond=0)
        if expires_in is None:
            expires_in = timedelta(seconds=self.configuration.SECONDS)
        expiration = created + expires_in

        to_encode: Dict[str, Any] = {
            "sub": str(subject),
            "aud": self.configuration.AUDIENCE,
            "iss": self.configuration.ISSUER,
            "iat": created,
            "nbf": created,
            "exp": expiration,
        }
        if claims:
            to_encode.update(claims)

        encoded = jwt.encode(
            to_encode,
            self.signing.key,
            algorithm=self.signing.algorithm,
        )
        return AccessToken(
            created=created,
            expiration=expiration,
            access_token=encoded,
        )

    def decode_token(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a JWT.

        Raises:
            TokenExpiredError: If the token lifetime has passed
            InvalidTokenError: On bad signature, audience, issuer or format
        """
        try:
            return jwt.decode(
                token,
                self.signing.key,
                algorithms=[self.signing.algorithm],
                audience=self.configuration.AUDIENCE,
                issuer=self.configuration.ISSUER,
                options={"leeway": 0},
            )
        except ExpiredSignatureError:
            raise TokenExpiredError()
        except JWTError as e:
            raise InvalidTokenError(message=f"Invalid token: {str(e)}")
