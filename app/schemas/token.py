from pydantic import BaseModel


class SessionClaims(BaseModel):
    """Identity carried by a validated session credential."""

    user_id: int
    email: str
    is_admin: bool = False
