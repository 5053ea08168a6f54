from .logout import TokenRevocationService
from .registration import RegistrationRequest, UserRegistrationService
from .session import SessionRotationManager
from .token import TokenIssuer, TokenValidationResult, TokenValidator
from .user_authentication import LoginContext, UserAuthenticationService

__all__ = [
    "TokenIssuer",
    "TokenValidator",
    "TokenValidationResult",
    "SessionRotationManager",
    "TokenRevocationService",
    "UserAuthenticationService",
    "LoginContext",
    "UserRegistrationService",
    "RegistrationRequest",
]
