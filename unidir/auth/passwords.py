"""Password hashing with bcrypt."""

import bcrypt

# bcrypt only looks at the first 72 bytes
_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Hashes and checks user passwords."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plaintext password."""
        password_bytes = password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
        hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode("utf-8")

    def verify(self, password: str, hashed: str | None) -> bool:
        """Check a plaintext password against a stored hash.

        Malformed or missing hashes never match.
        """
        if not hashed:
            return False
        password_bytes = password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed.encode("utf-8"))
        except ValueError:
            return False
