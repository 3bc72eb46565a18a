# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# The claims we read from a Supabase access token, and the identity they
# turn into. AuthUser.id is the owner of every song and settings row the
# request touches.
# =============================================================================

from typing import Optional, Union
from uuid import UUID

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """
    Claims of a Supabase access token that the API relies on.

    Anything else in the token is ignored.
    """
    sub: str  # auth.users id
    aud: Union[str, list[str]]
    exp: int
    iat: Optional[int] = None
    email: Optional[str] = None
    role: Optional[str] = None  # "authenticated" for signed-in users

    @property
    def user_id(self) -> UUID:
        """
        The subject as a UUID.

        Raises:
            ValueError: If `sub` is not a UUID (e.g. a service token)
        """
        return UUID(self.sub)


class AuthUser(BaseModel):
    """
    The signed-in account making the request.
    """
    id: UUID
    email: Optional[str] = None

    class Config:
        frozen = True  # Make immutable

    @classmethod
    def from_token(cls, payload: TokenPayload) -> "AuthUser":
        return cls(id=payload.user_id, email=payload.email)
