from typing import Optional
import re

import bleach
from pydantic import BaseModel, EmailStr, Field, field_validator


def _clean(value: str) -> str:
    return bleach.clean(value, tags=[], attributes={}, strip=True).strip()


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    message: str = Field(..., min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("name", "message")
    @classmethod
    def sanitize_text(cls, value: str) -> str:
        sanitized = _clean(value)
        if not sanitized:
            raise ValueError("Field cannot be blank")
        return sanitized

    @field_validator("message")
    @classmethod
    def validate_length(cls, value: str) -> str:
        if len(value) > 2000:
            raise ValueError("Message too long (max 2000 chars)")
        return value

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not re.match(r"^\+?[\d\s-]{7,20}$", value):
            raise ValueError("Phone must contain 7-20 digits")
        return value
