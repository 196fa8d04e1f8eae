# homeserve/models/auth.py
from pydantic import BaseModel
from enum import Enum
from typing import Optional

class UserRole(str, Enum):
    USER = "user"
    PROVIDER = "provider"
    ADMIN = "admin"

class TokenData(BaseModel):
    sub: Optional[str] = None
    role: Optional[UserRole] = None

class AuthContext(BaseModel):
    """The verified caller of a request"""
    user_id: str
    role: UserRole
