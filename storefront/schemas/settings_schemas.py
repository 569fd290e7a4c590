from pydantic import BaseModel, Field
from datetime import datetime


class SettingUpdate(BaseModel):
    key: str = Field(min_length=1, max_length=100)
    value: str


class SettingRead(BaseModel):
    id: int
    key: str
    value: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
