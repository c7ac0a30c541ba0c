from pydantic import BaseModel, Field, SecretStr


class CardInfoCreate(BaseModel):
    card_number: SecretStr
    expiry_date: str = Field(..., max_length=7)

    model_config = {"extra": "forbid"}
