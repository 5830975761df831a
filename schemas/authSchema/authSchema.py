from pydantic import BaseModel, EmailStr, Field
from datetime import datetime


class RegisterUser(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: str


class SignInUser(BaseModel):
    email: EmailStr
    password: str


class UserSummary(BaseModel):
    id: int
    name: str
    role: str

    class Config:
        from_attributes = True


class UserOut(UserSummary):
    email: EmailStr
    created_at: datetime


class AuthResponse(BaseModel):
    token: str
    user: UserSummary
