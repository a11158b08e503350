from .requests import LoginRequest, PasswordChangeRequest, PasswordResetRequest, RegisterRequest
from .responses import AuthResponse, AvatarOut, MessageOut, UserOut

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "PasswordResetRequest",
    "PasswordChangeRequest",
    "UserOut",
    "AuthResponse",
    "AvatarOut",
    "MessageOut",
]
