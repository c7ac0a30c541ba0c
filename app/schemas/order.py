from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    # cash or card, parsed by OrderService.place
    payment_method: str = Field(..., min_length=1, max_length=20)

    model_config = {"extra": "forbid"}


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., min_length=1, max_length=20)

    model_config = {"extra": "forbid"}
