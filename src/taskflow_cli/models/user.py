"""User and session data models."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Identity(BaseModel):
    """The authenticated user as shown by the client."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    display_name: str = Field(alias="name")


class Session(BaseModel):
    """Credential and identity, always set together."""

    credential: str = Field(min_length=1)
    identity: Identity


class LoginResponse(BaseModel):
    """Payload returned by POST /auth/login."""

    token: str
    email: EmailStr
    name: str

    def to_identity(self) -> Identity:
        return Identity(email=self.email, display_name=self.name)
