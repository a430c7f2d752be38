"""Use cases of the user domain.

Each handler runs one load-decide-append cycle against the event store.
Commands and queries carry primitives only; handlers turn them into value
objects, so invalid input fails with ``ValueError`` before anything is
loaded or written.
"""

import logging
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from ..application import EventStore
from ..domain import Clock
from .exceptions import CouldNotAuthenticate, CouldNotRegister
from .read_model import UserReadModel
from .security import PasswordHasher
from .user import User
from .values import DateOfBirth, DisplayName, Email, PlainPassword, UserId

LOGGER = logging.getLogger(__name__)


class RegisterUser(BaseModel):
    """Command to register a new user."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    password: str = Field(repr=False)
    display_name: str
    date_of_birth: str | date


class Login(BaseModel):
    """Command to log a user in.

    The user ID is looked up by email (see FindUserIdByEmail) before the
    command is sent.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    password: str = Field(repr=False)


class FindUserIdByEmail(BaseModel):
    """Query for the ID of the user registered with an email address."""

    model_config = ConfigDict(frozen=True)

    email: str


class RegisterUserHandler:
    """Registers a user after checking the email is not already in use."""

    __slots__ = ("event_store", "read_model", "clock", "password_hasher")

    def __init__(
        self,
        event_store: EventStore,
        read_model: UserReadModel,
        clock: Clock,
        password_hasher: PasswordHasher,
    ):
        self.event_store = event_store
        self.read_model = read_model
        self.clock = clock
        self.password_hasher = password_hasher

    async def __call__(self, command: RegisterUser) -> None:
        """Handle a RegisterUser command.

        Raises:
            ValueError: If a field of the command is invalid.
            CouldNotRegister: If the email is in use or the user is too young.
            ConcurrencyError: If a user with the same ID was registered
                concurrently.
        """
        user_id = UserId.from_string(command.user_id)
        email = Email.from_string(command.email)
        display_name = DisplayName.from_string(command.display_name)
        if isinstance(command.date_of_birth, date):
            date_of_birth = DateOfBirth(value=command.date_of_birth)
        else:
            date_of_birth = DateOfBirth.from_string(command.date_of_birth)
        password = PlainPassword.from_string(command.password)

        if await self.read_model.exists_with_email(email):
            LOGGER.info(
                "Registration rejected",
                extra={"aggregate_id": str(user_id), "reason": "email_already_in_use"},
            )
            raise CouldNotRegister.because_email_is_already_in_use(str(email))

        now = self.clock.now()
        try:
            # Reject on age before paying for the hash.
            User.ensure_can_register(date_of_birth, now)
            user = User.register(
                user_id,
                email,
                self.password_hasher.hash(password),
                display_name,
                date_of_birth,
                now,
            )
        except CouldNotRegister as e:
            LOGGER.info(
                "Registration rejected",
                extra={"aggregate_id": str(user_id), "reason": e.reason.value},
            )
            raise

        await self.event_store.append(
            str(user_id),
            User.aggregate_type,
            user.release_events(),
            expected_version=0,
        )
        LOGGER.info("User registered", extra={"aggregate_id": str(user_id)})


class LoginHandler:
    """Verifies a user's password and records the login."""

    __slots__ = ("event_store", "clock", "password_hasher")

    def __init__(self, event_store: EventStore, clock: Clock, password_hasher: PasswordHasher):
        self.event_store = event_store
        self.clock = clock
        self.password_hasher = password_hasher

    async def __call__(self, command: Login) -> None:
        """Handle a Login command.

        Raises:
            CouldNotAuthenticate: If the user is unknown or the password is wrong.
            ConcurrencyError: If the user's stream changed while logging in.
        """
        events = await self.event_store.get_events(command.user_id, User.aggregate_type)
        if not events:
            LOGGER.info("Login rejected", extra={"aggregate_id": command.user_id})
            raise CouldNotAuthenticate.because_of_invalid_credentials()

        user = User.reconstitute(events)  # type: ignore[arg-type]
        try:
            user.login(
                PlainPassword.from_string(command.password),
                self.password_hasher,
                self.clock.now(),
            )
        except (CouldNotAuthenticate, ValueError):
            LOGGER.info("Login rejected", extra={"aggregate_id": command.user_id})
            raise CouldNotAuthenticate.because_of_invalid_credentials() from None

        expected_version = user.committed_version
        await self.event_store.append(
            command.user_id,
            User.aggregate_type,
            user.release_events(),
            expected_version=expected_version,
        )
        LOGGER.info(
            "User logged in",
            extra={"aggregate_id": command.user_id, "version": expected_version + 1},
        )


class FindUserIdByEmailHandler:
    """Looks up a user ID in the read model."""

    __slots__ = ("read_model",)

    def __init__(self, read_model: UserReadModel):
        self.read_model = read_model

    async def __call__(self, query: FindUserIdByEmail) -> str | None:
        try:
            email = Email.from_string(query.email)
        except ValueError:
            return None
        return await self.read_model.find_user_id_by_email(email)
