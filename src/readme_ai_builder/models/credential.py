from typing import Self

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from readme_ai_builder.errors import AuthError


class AccessCredential(BaseModel):
    """An opaque bearer token scoped to one user's GitHub account."""

    model_config = ConfigDict(frozen=True)

    token: SecretStr = Field(description="The GitHub access token.")

    @classmethod
    def from_token(cls, token: str | None) -> Self:
        if token is None or not token.strip():
            raise AuthError(message="A GitHub access credential is required.")

        return cls(token=SecretStr(token.strip()))

    def get_token(self) -> str:
        return self.token.get_secret_value()
