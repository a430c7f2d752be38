"""User accounts: an event-sourced aggregate with registration and login."""

from .events import USER_EVENTS, UserEvent, UserLoggedIn, UserRegistered
from .exceptions import CouldNotAuthenticate, CouldNotRegister, RegistrationFailureReason
from .handlers import (
    FindUserIdByEmail,
    FindUserIdByEmailHandler,
    Login,
    LoginHandler,
    RegisterUser,
    RegisterUserHandler,
)
from .read_model import InMemoryUserReadModel, UserProjection, UserReadModel, UserView
from .security import BcryptPasswordHasher, PasswordHasher
from .user import MINIMUM_AGE, User
from .values import DateOfBirth, DisplayName, Email, HashedPassword, PlainPassword, UserId

__all__ = [
    # Aggregate and events
    "User",
    "MINIMUM_AGE",
    "UserEvent",
    "UserRegistered",
    "UserLoggedIn",
    "USER_EVENTS",
    # Value objects
    "UserId",
    "Email",
    "PlainPassword",
    "HashedPassword",
    "DisplayName",
    "DateOfBirth",
    # Errors
    "CouldNotAuthenticate",
    "CouldNotRegister",
    "RegistrationFailureReason",
    # Use cases
    "RegisterUser",
    "RegisterUserHandler",
    "Login",
    "LoginHandler",
    "FindUserIdByEmail",
    "FindUserIdByEmailHandler",
    # Read side
    "UserReadModel",
    "UserProjection",
    "UserView",
    "InMemoryUserReadModel",
    # Security
    "PasswordHasher",
    "BcryptPasswordHasher",
]
