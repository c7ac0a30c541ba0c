from pydantic import BaseModel, Field
from typing import Optional


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price: int = Field(..., ge=0)
    image: str = Field(..., min_length=1, max_length=500)
    category: str = Field(..., min_length=1, max_length=100)

    model_config = {"extra": "forbid"}


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    price: Optional[int] = Field(None, ge=0)
    image: Optional[str] = Field(None, min_length=1, max_length=500)
    category: Optional[str] = Field(None, min_length=1, max_length=100)

    model_config = {"extra": "forbid"}
