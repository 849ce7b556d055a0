"""Authentication module."""

from bursary.modules.auth.router import router
from bursary.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "LoginRequest", "LoginResponse"]
