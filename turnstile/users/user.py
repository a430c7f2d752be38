from datetime import datetime
from typing import ClassVar

from typing_extensions import assert_never

from ..domain import Aggregate
from .events import UserEvent, UserLoggedIn, UserRegistered
from .exceptions import CouldNotAuthenticate, CouldNotRegister
from .security import PasswordHasher
from .values import DateOfBirth, DisplayName, Email, HashedPassword, PlainPassword, UserId

MINIMUM_AGE = 18


class User(Aggregate[UserEvent]):
    """User account aggregate.

    State is derived from UserRegistered and UserLoggedIn events. Use
    ``register`` to create a new user, or ``reconstitute`` to rebuild one
    from its event stream.

    Examples:
        >>> user = User.register(user_id, email, hashed, name, dob, clock.now())
        >>> await store.append(str(user_id), User.aggregate_type, user.release_events(), 0)
        >>>
        >>> user = User.reconstitute(await store.get_events(str(user_id), User.aggregate_type))
        >>> user.login(PlainPassword.from_string("correct horse"), hasher, clock.now())
    """

    aggregate_type: ClassVar[str] = "user"

    def __init__(self) -> None:
        super().__init__()
        self._id: UserId | None = None
        self._email: Email | None = None
        self._hashed_password: HashedPassword | None = None
        self._display_name: DisplayName | None = None
        self._date_of_birth: DateOfBirth | None = None
        self._registered_at: datetime | None = None
        self._last_login_at: datetime | None = None

    @staticmethod
    def ensure_can_register(date_of_birth: DateOfBirth, now: datetime) -> None:
        """Check the age rules of registration without recording anything.

        Raises:
            CouldNotRegister: If the date of birth is in the future or the
                user is younger than MINIMUM_AGE.
        """
        if date_of_birth.is_after(now):
            raise CouldNotRegister.because_date_of_birth_is_in_the_future()
        if date_of_birth.age_at(now) < MINIMUM_AGE:
            raise CouldNotRegister.because_user_is_too_young(MINIMUM_AGE)

    @classmethod
    def register(
        cls,
        user_id: UserId,
        email: Email,
        hashed_password: HashedPassword,
        display_name: DisplayName,
        date_of_birth: DateOfBirth,
        now: datetime,
    ) -> "User":
        """Register a new user.

        Raises:
            CouldNotRegister: If the date of birth is in the future or the
                user is younger than MINIMUM_AGE.
        """
        cls.ensure_can_register(date_of_birth, now)

        user = cls()
        user._record_that(
            UserRegistered(
                aggregate_id=str(user_id),
                occurred_at=now,
                email=str(email),
                hashed_password=hashed_password.value,
                display_name=str(display_name),
                date_of_birth=date_of_birth.value,
            )
        )
        return user

    def login(self, password: PlainPassword, verifier: PasswordHasher, now: datetime) -> None:
        """Record a successful login.

        Raises:
            CouldNotAuthenticate: If the user is not registered or the
                password does not match. No event is recorded.
        """
        if self._id is None or self._hashed_password is None:
            raise CouldNotAuthenticate.because_of_invalid_credentials()
        if not verifier.verify(password, self._hashed_password):
            raise CouldNotAuthenticate.because_of_invalid_credentials()

        self._record_that(UserLoggedIn(aggregate_id=str(self._id), occurred_at=now))

    @property
    def id(self) -> UserId | None:
        return self._id

    @property
    def email(self) -> Email | None:
        return self._email

    @property
    def display_name(self) -> DisplayName | None:
        return self._display_name

    @property
    def date_of_birth(self) -> DateOfBirth | None:
        return self._date_of_birth

    @property
    def registered_at(self) -> datetime | None:
        return self._registered_at

    @property
    def last_login_at(self) -> datetime | None:
        return self._last_login_at

    def _apply(self, event: UserEvent) -> None:
        match event:
            case UserRegistered():
                self._id = UserId.from_string(event.aggregate_id)
                self._email = Email.from_string(event.email)
                self._hashed_password = HashedPassword.from_hash(event.hashed_password)
                self._display_name = DisplayName.from_string(event.display_name)
                self._date_of_birth = DateOfBirth(value=event.date_of_birth)
                self._registered_at = event.occurred_at
            case UserLoggedIn():
                self._last_login_at = event.occurred_at
            case _:
                assert_never(event)
