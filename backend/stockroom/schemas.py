from pydantic import BaseModel, Field
from typing import Optional

# Fields are optional here so that missing values reach the service layer
# and come back as a 400 with the usual message.

class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

class RoleUpdate(BaseModel):
    role: Optional[str] = None

class ForgotPasswordRequest(BaseModel):
    email: Optional[str] = None

class ResetPasswordRequest(BaseModel):
    token: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")

class ProductPayload(BaseModel):
    name: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    stock: Optional[int] = None
    price: Optional[float] = None
    reorder_level: Optional[int] = None

class ProductRead(ProductPayload):
    id: int

    class Config:
        from_attributes = True
