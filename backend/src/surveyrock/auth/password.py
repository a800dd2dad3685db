"""Password hashing with bcrypt via passlib."""

from passlib.context import CryptContext

MIN_PASSWORD_LENGTH = 8


class PasswordService:
    """Hashes and verifies user passwords."""

    def __init__(self, rounds: int = 12):
        """Initialize the password service.

        Args:
            rounds: bcrypt work factor (tests use the minimum of 4)
        """
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def needs_rehash(self, hash: str) -> bool:
        """True when a stored hash was made with weaker settings than the current ones."""
        try:
            return self._context.needs_update(hash)
        except ValueError:
            return False

    def verify(self, password: str, hash: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        try:
            return self._context.verify(password, hash)
        except ValueError:
            return False

    @staticmethod
    def check_strength(password: str) -> str | None:
        """Return a reason the password is unacceptable, or None."""
        if len(password) < MIN_PASSWORD_LENGTH:
            return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        return None
