from .auth_service import AuthResult, AuthService
from .security import TokenService, hash_password, verify_password

__all__ = [
    "AuthResult",
    "AuthService",
    "TokenService",
    "hash_password",
    "verify_password",
]
