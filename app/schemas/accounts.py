from pydantic import BaseModel, Field
from typing import Optional


class CreateAccountRequest(BaseModel):
    username: str = Field(min_length=3, max_length=80)
    password: str = Field(min_length=6)
    role: str
    region: Optional[str] = None


class UpdateAccountRequest(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=80)
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[str] = None
    region: Optional[str] = None
