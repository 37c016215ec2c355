"""User Model — account registration, profile reads/edits, and removal.

Invariants:
    - Passwords stored only as salted PBKDF2-SHA256 digests; two accounts with the
      same password never share a stored value
    - Reads never return hashed_password
    - Duplicate registration -> "already exists"; update/delete of a missing
      account -> "not found on disk"
    - Deleting a user removes their tokens and cart (ORM cascade)
"""

import hashlib
import hmac
import secrets

from pizzeria.core.domain_types import ALREADY_EXISTS, NOT_FOUND_ON_DISK, Verb
from pizzeria.core.outcomes import InternalError, ModelOutcome, Success
from pizzeria.models.user import User
from pizzeria.schemas.user import UserCreate, UserLookup, UserUpdate
from pizzeria.services.resource_model import ResourceModel

_SCHEME = "pbkdf2_sha256"
_SALT_BYTES = 16
DEFAULT_ITERATIONS = 600_000


def hash_password(
    password: str,
    secret: str,
    iterations: int = DEFAULT_ITERATIONS,
    salt: str | None = None,
) -> str:
    """PBKDF2-SHA256 over a per-user random salt, peppered with the app secret.

    Stored as "pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>"; verification
    reads the iteration count back from the stored value.
    """
    salt = salt or secrets.token_hex(_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        (salt + secret).encode("utf-8"),
        iterations,
    )
    return f"{_SCHEME}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, hashed: str, secret: str) -> bool:
    try:
        scheme, iterations, salt, _ = hashed.split("$")
        rounds = int(iterations)
    except ValueError:
        return False
    if scheme != _SCHEME:
        return False
    return hmac.compare_digest(hash_password(password, secret, rounds, salt), hashed)


class UserModel(ResourceModel):
    """Customer accounts keyed by email."""

    schemas = {
        Verb.CREATE: UserCreate,
        Verb.READ: UserLookup,
        Verb.UPDATE: UserUpdate,
        Verb.DELETE: UserLookup,
    }
    conflict_message = "That email address has already been registered."

    def __init__(
        self, verb, data, db,
        password_secret: str = "change-me",
        password_iterations: int = DEFAULT_ITERATIONS,
    ):
        super().__init__(verb, data, db)
        self._secret = password_secret
        self._iterations = password_iterations

    async def _create(self) -> ModelOutcome:
        if await self.db.get(User, self.input.email) is not None:
            return InternalError((ALREADY_EXISTS,))
        self.db.add(User(
            email=self.input.email,
            name=self.input.name,
            street_address=self.input.street_address,
            hashed_password=hash_password(self.input.password, self._secret, self._iterations),
        ))
        await self.db.commit()
        return Success()

    async def _read(self) -> ModelOutcome:
        user = await self.db.get(User, self.input.email)
        return Success(user.to_entity() if user else None)

    async def _update(self) -> ModelOutcome:
        user = await self.db.get(User, self.input.email)
        if user is None:
            return InternalError((NOT_FOUND_ON_DISK,))
        if self.input.name is not None:
            user.name = self.input.name
        if self.input.street_address is not None:
            user.street_address = self.input.street_address
        if self.input.password is not None:
            user.hashed_password = hash_password(self.input.password, self._secret, self._iterations)
        await self.db.commit()
        return Success()

    async def _delete(self) -> ModelOutcome:
        user = await self.db.get(User, self.input.email)
        if user is None:
            return InternalError((NOT_FOUND_ON_DISK,))
        await self.db.delete(user)
        await self.db.commit()
        return Success()
