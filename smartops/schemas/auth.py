from pydantic import BaseModel

from smartops.schemas.user import UserResponse


class AuthSession(BaseModel):
    """Authenticated user together with the token issued for the session."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"
