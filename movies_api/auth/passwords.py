"""
Password hashing with bcrypt.

Hashes embed algorithm version, cost and salt, so verification needs
nothing but the stored string.
"""
import bcrypt

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class PasswordHasher:
    """Salted, adaptive one-way password hashing."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Generate a bcrypt hash with a fresh salt."""
        return bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt(rounds=self.rounds)
        ).decode('utf-8')

    def verify(self, password: str, hashed_password: str) -> bool:
        """Check a password against a stored hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(
                password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except (ValueError, TypeError, AttributeError):
            return False

    @staticmethod
    def is_hashed(value: str) -> bool:
        """Whether the value already looks like a bcrypt hash."""
        return value.startswith(BCRYPT_PREFIXES)
