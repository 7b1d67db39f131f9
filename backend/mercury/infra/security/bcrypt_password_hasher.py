# mercury/infra/security/bcrypt_password_hasher.py
from __future__ import annotations

import bcrypt

from mercury.services._shared.ports import PasswordHasher

DEFAULT_ROUNDS = 10
#: bcrypt ignores input beyond this many bytes
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher(PasswordHasher):
    """
    Adaptive-cost salted password hashing backed by ``bcrypt``.

    Output is the modular-crypt string ``$2b$<cost>$<salt><digest>`` (60
    chars), so salt and cost travel with the hash.

    :param rounds: bcrypt work factor (``log2`` of the iteration count).
    :type rounds: int
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS, *, encoding: str = "utf-8") -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("bcrypt rounds must be between 4 and 31.")
        self.rounds = rounds
        self._encoding = encoding

    def hash(self, plain: str) -> str:
        """Return a freshly salted hash of ``plain``."""
        if not isinstance(plain, str) or not plain:
            raise ValueError("Password must be a non-empty string.")
        encoded = plain.encode(self._encoding)
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")
        hashed = bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode(self._encoding)

    def verify(self, plain: str, stored: str) -> bool:
        """
        Check ``plain`` against a stored hash.

        :returns: ``False`` when the password differs or ``stored`` is not a
            bcrypt hash.
        """
        if not plain or not stored:
            return False
        try:
            return bcrypt.checkpw(plain.encode(self._encoding), stored.encode(self._encoding))
        except ValueError:
            # Invalid salt / malformed hash
            return False
