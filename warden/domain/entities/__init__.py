from .user import Role, UpdatePasswordParams, User, UserDraft

__all__ = ["Role", "UpdatePasswordParams", "User", "UserDraft"]
