"""Dispatcher — method check, authorization, and outcome mapping against fake models.

Tests cover:
    - Disallowed verb is 405 and builds no model
    - Missing token is 400 before any model is built
    - Expired / mismatched / unknown tokens are 403 and build no model
    - Valid token + read of a missing target is 404
    - "already exists" on create is 400 with the conflict message, never 500
    - Invalid models are 400 with every tag and the verb never runs
    - Repeated reads give identical responses
    - The token resource needs no headers at all
    - respond is called exactly once on every path, including model crashes
"""

import asyncio
import logging

import pytest

from pizzeria.core.dispatch_types import Request, ResourceBinding
from pizzeria.core.domain_types import ALL_VERBS, ALREADY_EXISTS, Verb
from pizzeria.core.errors import UnknownResourceError
from pizzeria.core.outcomes import InternalError, Success, ValidationFailed
from pizzeria.services.authorizer import Authorizer
from pizzeria.services.dispatcher import Dispatcher
from pizzeria.services.model_registry import ModelRegistry

from tests.services.fakes import (
    START_MS,
    FakeClock,
    FakeModelFactory,
    token_store_factory,
    user_store_factory,
)

EMAIL = "ada@example.com"
TOKEN_ID = "t" * 20
USER = {"name": "Ada", "email": EMAIL, "street_address": "1 Way"}


def _token(email=EMAIL, expires=START_MS + 60_000, token_id=TOKEN_ID):
    return {"id": token_id, "email": email, "expires": expires}


def _setup(
    outcome=None,
    errors=(),
    allowed=ALL_VERBS,
    public=frozenset(),
    tokens=None,
    token_factory=None,
    users=None,
    conflict_message=None,
    resource="carts",
):
    clock = FakeClock()
    carts = FakeModelFactory(outcome, errors, conflict_message)
    if token_factory is None:
        token_factory = token_store_factory(
            {TOKEN_ID: _token()} if tokens is None else tokens,
        )
    user_factory = (
        users if isinstance(users, FakeModelFactory)
        else user_store_factory({EMAIL: USER} if users is None else users)
    )
    registry = ModelRegistry({
        "carts": carts, "tokens": token_factory, "users": user_factory,
    })
    dispatcher = Dispatcher(
        ResourceBinding(resource, allowed, public),
        registry,
        Authorizer(registry, clock=clock),
    )
    return dispatcher, carts, token_factory, clock


def _request(verb, headers=None, query=None, payload=None, resource="carts"):
    if query is None and payload is None:
        if verb in (Verb.CREATE, Verb.UPDATE):
            payload = {"email": EMAIL}
        else:
            query = {"email": EMAIL}
    return Request(
        method=verb,
        resource_path=resource,
        headers={"token": TOKEN_ID} if headers is None else headers,
        query=query or {},
        payload=payload or {},
    )


async def _render(dispatcher, request):
    sent = []
    await dispatcher.render(
        request, lambda code, body=None: sent.append((code, body)), None,
    )
    assert len(sent) == 1
    return sent[0]


# ─── Method check ────────────────────────────────────────────────

@pytest.mark.parametrize("verb", [Verb.CREATE, Verb.UPDATE, Verb.DELETE])
async def test_disallowed_verb_is_405_and_builds_nothing(verb):
    dispatcher, carts, tokens, _ = _setup(allowed=frozenset({Verb.READ}))
    status, body = await _render(dispatcher, _request(verb))
    assert status == 405
    assert body is None
    assert carts.built == []
    assert tokens.built == []


# ─── Authorization ───────────────────────────────────────────────

async def test_missing_token_is_400_before_model_construction():
    dispatcher, carts, tokens, _ = _setup()
    status, body = await _render(dispatcher, _request(Verb.READ, headers={}))
    assert status == 400
    assert body == {"Error": "You must provide a token in the headers of the request."}
    assert carts.built == []
    assert tokens.built == []


async def test_expired_token_is_403_with_expiry_message():
    dispatcher, carts, _, _ = _setup(tokens={TOKEN_ID: _token(expires=START_MS - 1)})
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 403
    assert body == {"Error": "Token has expired"}
    assert carts.built == []


async def test_mismatched_email_is_403_with_generic_message():
    dispatcher, carts, _, _ = _setup(tokens={TOKEN_ID: _token(email="eve@example.com")})
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 403
    assert body["Error"] != "Token has expired"
    assert carts.built == []


async def test_unknown_token_is_403_not_a_crash():
    dispatcher, carts, _, _ = _setup(tokens={})
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 403
    assert "Error" in body
    assert carts.built == []


async def test_token_becomes_expired_as_clock_moves():
    dispatcher, _, _, clock = _setup(outcome=Success({"email": EMAIL}))
    status, _ = await _render(dispatcher, _request(Verb.READ))
    assert status == 200
    clock.advance(61)
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 403
    assert body == {"Error": "Token has expired"}


async def test_clock_read_once_per_authorization():
    dispatcher, _, _, clock = _setup()
    await _render(dispatcher, _request(Verb.READ))
    assert clock.reads == 1


async def test_token_resource_reachable_with_no_headers():
    dispatcher, _, tokens, _ = _setup(resource="tokens")
    status, _ = await _render(dispatcher, Request(
        Verb.CREATE, "tokens",
        payload={"email": EMAIL, "password": "correct-horse"},
    ))
    assert status == 200
    assert tokens.calls == [(Verb.CREATE, {"email": EMAIL, "password": "correct-horse"})]


async def test_public_verb_skips_token_check():
    dispatcher, carts, tokens, _ = _setup(public=frozenset({Verb.CREATE}))
    status, _ = await _render(dispatcher, _request(Verb.CREATE, headers={}))
    assert status == 200
    assert tokens.built == []
    assert len(carts.calls) == 1


async def test_user_lookup_miss_does_not_fail_request(caplog):
    dispatcher, _, _, _ = _setup(outcome=Success({"email": EMAIL}), users={})
    with caplog.at_level(logging.WARNING):
        status, _ = await _render(dispatcher, _request(Verb.READ))
    assert status == 200
    assert "User lookup" in caplog.text


async def test_user_lookup_crash_does_not_fail_request():
    dispatcher, _, _, _ = _setup(
        outcome=Success({"email": EMAIL}),
        users=FakeModelFactory(RuntimeError("db gone")),
    )
    status, _ = await _render(dispatcher, _request(Verb.READ))
    assert status == 200


async def test_token_store_crash_is_500_and_responds_once(caplog):
    dispatcher, carts, _, _ = _setup(
        token_factory=FakeModelFactory(RuntimeError("token store down")),
    )
    with caplog.at_level(logging.ERROR):
        status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 500
    assert body is None
    assert carts.built == []
    assert "token store down" in caplog.text


async def test_malformed_stored_token_is_500_not_a_crash():
    dispatcher, _, _, _ = _setup(tokens={TOKEN_ID: {"id": TOKEN_ID, "email": EMAIL}})
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 500
    assert body is None


# ─── Handler and outcome mapping ─────────────────────────────────

async def test_read_of_missing_target_is_404():
    dispatcher, _, _, _ = _setup(outcome=Success(None))
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 404
    assert body is None


async def test_read_returns_entity():
    dispatcher, _, _, _ = _setup(outcome=Success({"email": EMAIL, "items": []}))
    status, body = await _render(dispatcher, _request(Verb.READ))
    assert status == 200
    assert body == {"email": EMAIL, "items": []}


async def test_create_already_exists_is_400_conflict_not_500():
    dispatcher, _, _, _ = _setup(
        outcome=InternalError((ALREADY_EXISTS,)),
        conflict_message="A cart already exists for that email address.",
    )
    status, body = await _render(dispatcher, _request(Verb.CREATE))
    assert status == 400
    assert body == {"Error": "A cart already exists for that email address."}


@pytest.mark.parametrize("verb", [Verb.CREATE, Verb.UPDATE, Verb.DELETE])
async def test_invalid_model_is_400_and_verb_never_runs(verb):
    tags = ("email: field required", "items: field required")
    dispatcher, carts, _, _ = _setup(errors=tags)
    status, body = await _render(dispatcher, _request(verb))
    assert status == 400
    assert body == {"Errors": list(tags)}
    assert len(carts.built) == 1
    assert carts.calls == []


async def test_validation_failed_outcome_is_400_with_tags():
    dispatcher, _, _, _ = _setup(outcome=ValidationFailed(("menu item 9 does not exist",)))
    status, body = await _render(dispatcher, _request(Verb.UPDATE))
    assert status == 400
    assert body == {"Errors": ["menu item 9 does not exist"]}


async def test_internal_error_is_500_and_tags_only_logged(caplog):
    dispatcher, _, _, _ = _setup(outcome=InternalError(("EIO: disk failure",)))
    with caplog.at_level(logging.ERROR):
        status, body = await _render(dispatcher, _request(Verb.DELETE))
    assert status == 500
    assert body is None
    record = next(r for r in caplog.records if getattr(r, "tags", None))
    assert record.tags == ["EIO: disk failure"]


async def test_model_exception_is_500_and_responds_once():
    dispatcher, _, _, _ = _setup(outcome=RuntimeError("kaboom"))
    status, body = await _render(dispatcher, _request(Verb.CREATE))
    assert status == 500
    assert body is None


async def test_input_source_follows_verb():
    dispatcher, carts, _, _ = _setup()
    await _render(dispatcher, _request(
        Verb.READ, query={"email": EMAIL, "id": "1"}, payload={"ignored": True},
    ))
    await _render(dispatcher, _request(
        Verb.CREATE, query={"email": EMAIL}, payload={"email": EMAIL, "items": []},
    ))
    assert carts.built == [
        (Verb.READ, {"email": EMAIL, "id": "1"}),
        (Verb.CREATE, {"email": EMAIL, "items": []}),
    ]


async def test_repeated_read_is_idempotent():
    dispatcher, _, _, _ = _setup(outcome=Success({"email": EMAIL, "total_cents": 1000}))
    first = await _render(dispatcher, _request(Verb.READ))
    second = await _render(dispatcher, _request(Verb.READ))
    assert first == second


async def test_render_returns_the_result_it_responded_with():
    dispatcher, _, _, _ = _setup()
    sent = []
    result = await dispatcher.render(
        _request(Verb.DELETE), lambda code, body=None: sent.append((code, body)), None,
    )
    assert sent == [(result.status_code, result.body)]


async def test_concurrent_requests_keep_separate_identities():
    other = "bob@example.com"
    other_token = "b" * 20
    dispatcher, _, _, _ = _setup(
        outcome=lambda data: Success({"email": data["email"]}),
        tokens={
            TOKEN_ID: _token(),
            other_token: _token(email=other, token_id=other_token),
        },
        users={EMAIL: USER, other: {**USER, "email": other}},
    )
    results = await asyncio.gather(*[
        _render(dispatcher, _request(Verb.READ, headers={"token": t}, query={"email": e}))
        for t, e in [(TOKEN_ID, EMAIL), (other_token, other)] * 5
    ])
    for (status, body), expected in zip(results, [EMAIL, other] * 5):
        assert status == 200
        assert body == {"email": expected}


# ─── Configuration ───────────────────────────────────────────────

def test_unknown_resource_fails_at_bind_time():
    registry = ModelRegistry({
        "tokens": FakeModelFactory(), "users": FakeModelFactory(),
    })
    with pytest.raises(UnknownResourceError):
        Dispatcher(ResourceBinding("pizzas"), registry, Authorizer(registry))
