from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class ContactFormInput(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    subject: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)

    class Config:
        # whitespace-only fields count as blank
        str_strip_whitespace = True


class ContactRead(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True


class ContactResult(BaseModel):
    success: bool
    message: str
