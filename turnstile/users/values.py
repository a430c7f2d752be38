"""Value objects of the user domain.

Every value object validates on construction and is immutable afterwards.
Invalid input raises ``ValueError`` (pydantic's ``ValidationError`` is a
subclass), so callers can treat all of them alike.
"""

import re
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DISPLAY_NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8


class _ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class UserId(_ValueObject):
    """Identifier of a user, a UUID in canonical form."""

    value: str

    @field_validator("value")
    @classmethod
    def _canonical_uuid(cls, value: str) -> str:
        try:
            return str(UUID(value))
        except ValueError:
            raise ValueError(f"Invalid user ID {value!r}, expected a UUID") from None

    @classmethod
    def from_string(cls, value: str) -> "UserId":
        return cls(value=value)

    def __str__(self) -> str:
        return self.value


class Email(_ValueObject):
    """Lower-cased, syntactically valid email address."""

    value: EmailStr

    @classmethod
    def from_string(cls, value: str) -> "Email":
        return cls(value=value.strip().lower())

    def __str__(self) -> str:
        return self.value


class PlainPassword(_ValueObject):
    """A password as typed by the user. Never shown in reprs."""

    value: str = Field(repr=False)

    @field_validator("value")
    @classmethod
    def _check_strength(cls, value: str) -> str:
        if not value:
            raise ValueError("Password cannot be empty")
        if not value.strip():
            raise ValueError("Password cannot contain only whitespace")
        if len(value) < PASSWORD_MIN_LENGTH:
            raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
        return value

    @classmethod
    def from_string(cls, value: str) -> "PlainPassword":
        return cls(value=value)


class HashedPassword(_ValueObject):
    """Opaque password hash produced by a PasswordHasher."""

    value: str = Field(min_length=1, repr=False)

    @classmethod
    def from_hash(cls, value: str) -> "HashedPassword":
        return cls(value=value)


class DisplayName(_ValueObject):
    """Name shown to other users, 1 to 50 characters after trimming."""

    value: str

    @field_validator("value")
    @classmethod
    def _check_length(cls, value: str) -> str:
        if not value:
            raise ValueError("Display name cannot be empty")
        if len(value) > DISPLAY_NAME_MAX_LENGTH:
            raise ValueError(
                f"Display name cannot exceed {DISPLAY_NAME_MAX_LENGTH} characters"
            )
        return value

    @classmethod
    def from_string(cls, value: str) -> "DisplayName":
        return cls(value=value.strip())

    def __str__(self) -> str:
        return self.value


class DateOfBirth(_ValueObject):
    """Calendar date of birth, parsed strictly from ``YYYY-MM-DD``."""

    value: date

    @field_validator("value", mode="before")
    @classmethod
    def _parse_iso_date(cls, value: object) -> object:
        if isinstance(value, str):
            if not _ISO_DATE.match(value):
                raise ValueError("Invalid date format. Expected YYYY-MM-DD format.")
            try:
                return date.fromisoformat(value)
            except ValueError:
                raise ValueError(f"Invalid date {value!r}") from None
        return value

    @classmethod
    def from_string(cls, value: str) -> "DateOfBirth":
        return cls(value=value.strip())

    def age_at(self, moment: datetime | date) -> int:
        """Number of completed years at the given moment."""
        on = moment.date() if isinstance(moment, datetime) else moment
        had_birthday = (on.month, on.day) >= (self.value.month, self.value.day)
        return on.year - self.value.year - (0 if had_birthday else 1)

    def is_after(self, moment: datetime | date) -> bool:
        on = moment.date() if isinstance(moment, datetime) else moment
        return self.value > on

    def __str__(self) -> str:
        return self.value.isoformat()
