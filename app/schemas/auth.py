from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TokenData(BaseModel):
    """Token data schema for extracted token payload."""

    username: str
    user_id: UUID
    jti: str
    token_type: str


class Identity(BaseModel):
    """Authenticated caller as seen by the post core: who, and with what role."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    role: str = "user"
