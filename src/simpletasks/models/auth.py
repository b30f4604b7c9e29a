"""Authentication and failure models."""

from typing import Optional

from pydantic import BaseModel, Field


class AuthToken(BaseModel):
    """Token returned by login and registration."""

    token: str = Field(repr=False)


class Failure(BaseModel):
    """Error envelope returned by the API or synthesized locally."""

    message: str
    # Not part of the wire envelope, only filled in by the client.
    status_code: Optional[int] = None

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401
