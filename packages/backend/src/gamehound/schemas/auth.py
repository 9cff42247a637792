"""Pydantic schemas for registration, login, and the current user.

Learn: Request fields are Optional on purpose — "missing" and "empty"
must both come back as the same 400 ValidationError from the service,
rather than FastAPI's generic 422 for absent keys.
"""

from typing import Optional

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserPublic(BaseModel):
    """What clients may see about a user — never the hash, never the role."""
    id: int
    email: str
    name: str

    model_config = {"from_attributes": True}


class UserMe(UserPublic):
    role: str


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic
