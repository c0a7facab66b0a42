"""bcrypt implementation of PasswordHasher."""

import bcrypt

# 12 rounds (2^12 = 4096 iterations) for production hashing
BCRYPT_ROUNDS = 12


class BcryptPasswordHasher:
    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """Hash password using bcrypt with a fresh salt."""
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode('utf-8'), salt).decode('utf-8')

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Verify password against hash. False for a malformed hash."""
        try:
            return bcrypt.checkpw(plaintext.encode('utf-8'), hashed.encode('utf-8'))
        except ValueError:
            return False
