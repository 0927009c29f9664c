"""Password hashing strategies."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from refhub.domain.users.exceptions import MalformedPasswordHashError, PasswordHashingError
from refhub.domain.users.repositories import PasswordHasher
from refhub.shared.logging import logger


class WerkzeugPasswordHasher(PasswordHasher):
    """Salted adaptive hashing; digests look like ``method$salt$hash``."""

    def __init__(self, method: str = "scrypt") -> None:
        self._method = method

    def hash(self, password: str) -> str:
        try:
            return str(generate_password_hash(password, method=self._method))
        except (OSError, MemoryError, ValueError) as exc:
            logger.error(f"password.hash: failed with {type(exc).__name__}: {exc}")
            raise PasswordHashingError() from exc

    def verify(self, password: str, hashed: str) -> bool:
        if not hashed or hashed.count("$") < 2:
            raise MalformedPasswordHashError()
        try:
            return bool(check_password_hash(hashed, password))
        except (ValueError, TypeError) as exc:
            # Unknown method name or unparsable cost parameters.
            raise MalformedPasswordHashError() from exc
