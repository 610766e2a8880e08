
from pydantic import BaseModel, EmailStr, Field, field_validator
from projecthub.models.user import UserRole

class RegisterIn(BaseModel):
    name: str = Field(min_length=2, max_length=255)
    email: EmailStr
    password: str = Field(min_length=6, max_length=256)
    role: UserRole

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole

    class Config:
        from_attributes = True

class Principal(BaseModel):
    """Authenticated caller, rebuilt from token claims on every request."""
    id: int
    name: str
    email: str
    role: UserRole

    def has_role(self, *roles: UserRole) -> bool:
        return self.role in roles

class AuthOut(BaseModel):
    success: bool = True
    message: str
    token: str
    token_type: str = "bearer"
    user: UserOut

class VerifyOut(BaseModel):
    success: bool = True
    message: str = "Token is valid"
    user: UserOut
