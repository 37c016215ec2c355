"""Token Model — issues, reads, extends, and revokes bearer tokens.

Invariants:
    - Token ids are 20 random alphanumeric characters from `secrets`
    - expires = now + ttl at issue and on every extension
    - An expired token cannot be extended
    - Wrong email and wrong password produce the same caller-visible tag
"""

import secrets
import string

from pizzeria.core.domain_types import NOT_FOUND_ON_DISK, TokenId, Verb
from pizzeria.core.outcomes import (
    InternalError, ModelOutcome, Success, ValidationFailed,
)
from pizzeria.core.repository_protocols import Clock
from pizzeria.infrastructure.clock import now_ms
from pizzeria.models.token import Token
from pizzeria.models.user import User
from pizzeria.schemas.token import TOKEN_LENGTH, TokenCreate, TokenExtend, TokenLookup
from pizzeria.services.resource_model import ResourceModel
from pizzeria.services.user_model import verify_password

_ALPHABET = string.ascii_letters + string.digits

BAD_CREDENTIALS = "email or password is incorrect"
ALREADY_EXPIRED = "token has already expired and cannot be extended"


def new_token_id() -> TokenId:
    return TokenId("".join(secrets.choice(_ALPHABET) for _ in range(TOKEN_LENGTH)))


class TokenModel(ResourceModel):
    """Session credentials. The token resource itself is exempt from auth."""

    schemas = {
        Verb.CREATE: TokenCreate,
        Verb.READ: TokenLookup,
        Verb.UPDATE: TokenExtend,
        Verb.DELETE: TokenLookup,
    }
    conflict_message = "Could not issue a token, please try again."

    def __init__(
        self, verb, data, db,
        ttl_seconds: int = 3600,
        password_secret: str = "change-me",
        clock: Clock = now_ms,
    ):
        super().__init__(verb, data, db)
        self._ttl_ms = ttl_seconds * 1000
        self._secret = password_secret
        self._clock = clock

    async def _create(self) -> ModelOutcome:
        user = await self.db.get(User, self.input.email)
        if user is None or not verify_password(
            self.input.password, user.hashed_password, self._secret,
        ):
            return ValidationFailed((BAD_CREDENTIALS,))
        token = Token(
            id=new_token_id(),
            email=user.email,
            expires=self._clock() + self._ttl_ms,
        )
        self.db.add(token)
        await self.db.commit()
        return Success(token.to_entity())

    async def _read(self) -> ModelOutcome:
        token = await self.db.get(Token, self.input.id)
        return Success(token.to_entity() if token else None)

    async def _update(self) -> ModelOutcome:
        token = await self.db.get(Token, self.input.id)
        if token is None:
            return InternalError((NOT_FOUND_ON_DISK,))
        now = self._clock()
        if not token.expires > now:
            return ValidationFailed((ALREADY_EXPIRED,))
        token.expires = now + self._ttl_ms
        await self.db.commit()
        return Success()

    async def _delete(self) -> ModelOutcome:
        token = await self.db.get(Token, self.input.id)
        if token is None:
            return InternalError((NOT_FOUND_ON_DISK,))
        await self.db.delete(token)
        await self.db.commit()
        return Success()
