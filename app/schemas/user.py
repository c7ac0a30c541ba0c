from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Name cannot be blank')
        return v

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower()

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v.encode("utf-8")) > 72:
            raise ValueError('Password is too long')
        return v


class UserLogin(BaseModel):
    email: EmailStr
    password: str

    model_config = {"extra": "forbid"}

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower()


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None

    model_config = {"extra": "forbid"}

    @field_validator('email')
    @classmethod
    def lower_email(cls, v):
        return v.lower() if v else v
