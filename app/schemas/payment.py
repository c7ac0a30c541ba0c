from typing import Optional

from pydantic import BaseModel, Field, SecretStr


class CardDetails(BaseModel):
    # SecretStr keeps the full number out of reprs and logs
    number: SecretStr
    expiry: str = Field(..., max_length=7)
    name: Optional[str] = Field(None, max_length=100)

    model_config = {"extra": "forbid"}


class PaymentCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    method: str = Field(..., min_length=1, max_length=20)
    card: Optional[CardDetails] = None

    model_config = {"extra": "forbid"}
