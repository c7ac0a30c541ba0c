from pydantic import BaseModel, Field

MAX_ITEM_QUANTITY = 100


class CartItemCreate(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1, le=MAX_ITEM_QUANTITY)

    model_config = {"extra": "forbid"}


class CartItemUpdate(BaseModel):
    # Anything below 1 removes the item
    quantity: int = Field(..., le=MAX_ITEM_QUANTITY)

    model_config = {"extra": "forbid"}
