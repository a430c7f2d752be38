"""Business rule violations of the user domain."""

from enum import Enum

from ..domain import DomainError


class RegistrationFailureReason(Enum):
    """Why a registration was rejected."""

    EMAIL_ALREADY_IN_USE = "email_already_in_use"
    USER_TOO_YOUNG = "user_too_young"
    DATE_OF_BIRTH_IN_THE_FUTURE = "date_of_birth_in_the_future"


class CouldNotRegister(DomainError):
    """Raised when a registration violates a business rule.

    Attributes:
        reason: The rule that was violated.
    """

    def __init__(self, reason: RegistrationFailureReason, message: str):
        super().__init__(message)
        self.reason = reason

    @classmethod
    def because_email_is_already_in_use(cls, email: str) -> "CouldNotRegister":
        return cls(
            RegistrationFailureReason.EMAIL_ALREADY_IN_USE,
            f'Could not register: email "{email}" is already in use.',
        )

    @classmethod
    def because_user_is_too_young(cls, minimum_age: int) -> "CouldNotRegister":
        return cls(
            RegistrationFailureReason.USER_TOO_YOUNG,
            f"Could not register: users must be at least {minimum_age} years old.",
        )

    @classmethod
    def because_date_of_birth_is_in_the_future(cls) -> "CouldNotRegister":
        return cls(
            RegistrationFailureReason.DATE_OF_BIRTH_IN_THE_FUTURE,
            "Could not register: date of birth is in the future.",
        )


class CouldNotAuthenticate(DomainError):
    """Raised when credentials do not match a registered user."""

    @classmethod
    def because_of_invalid_credentials(cls) -> "CouldNotAuthenticate":
        return cls("Could not authenticate: invalid credentials.")
