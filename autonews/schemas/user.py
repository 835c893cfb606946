from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from autonews.models.profile import Role

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    display_name: str | None = Field(default=None, max_length=80)

class UserLogin(BaseModel):
    email: EmailStr
    password: str

class UserResponse(BaseModel):
    id: str
    email: str
    role: Role
    display_name: str | None = None
    created_at: datetime
    last_login: datetime | None = None

class Token(BaseModel):
    access_token: str
    token_type: str
