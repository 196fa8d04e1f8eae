# homeserve/utils/__init__.py
from .auth import (
    oauth2_scheme,
    decode_access_token,
    get_current_user,
    require_role
)

__all__ = [
    "oauth2_scheme",
    "decode_access_token",
    "get_current_user",
    "require_role"
]
