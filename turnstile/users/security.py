"""Password hashing port and its bcrypt adapter."""

from abc import ABC, abstractmethod

import bcrypt

from .values import HashedPassword, PlainPassword


class PasswordHasher(ABC):
    """Hashes passwords and verifies them against stored hashes.

    The algorithm is an external capability; the domain only relies on
    ``verify(password, hash)`` agreeing with ``hash(password)``.
    """

    __slots__ = ()

    @abstractmethod
    def hash(self, password: PlainPassword) -> HashedPassword: ...

    @abstractmethod
    def verify(self, password: PlainPassword, hashed: HashedPassword) -> bool: ...


class BcryptPasswordHasher(PasswordHasher):
    """PasswordHasher backed by the ``bcrypt`` library.

    Attributes:
        rounds: bcrypt cost factor (log2 of the iteration count).
    """

    __slots__ = ("rounds",)

    def __init__(self, rounds: int = 12):
        if not 4 <= rounds <= 31:
            raise ValueError("rounds must be between 4 and 31")
        self.rounds = rounds

    def hash(self, password: PlainPassword) -> HashedPassword:
        digest = bcrypt.hashpw(password.value.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return HashedPassword.from_hash(digest.decode("utf-8"))

    def verify(self, password: PlainPassword, hashed: HashedPassword) -> bool:
        try:
            return bcrypt.checkpw(password.value.encode("utf-8"), hashed.value.encode("utf-8"))
        except ValueError:
            # Not a bcrypt hash
            return False
