"""Password Hashing: passlib CryptContext configured from settings.

Invariants:
    - Raw passwords never leave this module or reach the database
    - Scheme and cost come from configuration (bcrypt by default)
"""

from passlib.context import CryptContext


class PasswordHasher:
    def __init__(self, scheme: str = "bcrypt", rounds: int | None = None):
        options = {f"{scheme}__rounds": rounds} if rounds else {}
        self._context = CryptContext(schemes=[scheme], deprecated="auto", **options)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)
