"""Token manager for verifying bearer tokens issued by the auth subsystem."""

from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from jose import JWTError, jwt

from app.configs import Settings
from app.schemas.auth import TokenData


def create_access_token(
    user_id: UUID,
    username: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a new access token with the claims `decode_access_token` checks.

    Issuing tokens belongs to the auth subsystem; this exists for seeding
    scripts and tests.

    Args:
        user_id: User's UUID
        username: User's username
        settings: Signing key, algorithm, issuer and audience
        expires_delta: Optional expiration time delta

    Returns:
        str: Encoded JWT access token
    """
    now = datetime.now(UTC)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": username,
        "user_id": str(user_id),
        "jti": str(uuid4()),
        "iat": now,
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "type": "access",
    }

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings) -> TokenData | None:
    """
    Decode and validate an access token.

    Args:
        token: JWT token string
        settings: Verification key, algorithm, issuer and audience

    Returns:
        TokenData | None: Decoded token data or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None

    username: str | None = payload.get("sub")
    user_id: str | None = payload.get("user_id")
    jti: str | None = payload.get("jti")
    token_type: str | None = payload.get("type")

    if not username or not user_id or not jti or token_type != "access":
        return None

    try:
        return TokenData(
            username=username,
            user_id=UUID(user_id),
            jti=jti,
            token_type=token_type,
        )
    except ValueError:
        return None
