"""Unit tests for the access gate."""

import asyncio

import pytest

from unidir.auth.gate import AccessGate, get_current_principal
from unidir.auth.revocation import RevocationRegistry
from unidir.auth.tokens import TokenConfig, TokenService
from unidir.core.entities import EntityKind
from unidir.core.errors import AuthError, StoreError
from unidir.runtime.storage.memory import InMemoryDirectoryStore


class RecordingStore(InMemoryDirectoryStore):
    """In-memory store that counts user lookups."""

    def __init__(self, fail: bool = False) -> None:
        super().__init__()
        self.lookups = 0
        self.fail = fail

    async def get_user_by_email(self, email):
        self.lookups += 1
        if self.fail:
            raise StoreError("connection lost")
        return await super().get_user_by_email(email)


@pytest.fixture
def tokens():
    return TokenService(TokenConfig(secret_key="gate-secret"))


@pytest.fixture
def store():
    store = RecordingStore()
    asyncio.run(store.create(EntityKind.USER, {
        "name": "Ada",
        "email": "ada@example.com",
        "password": "hash",
        "role": "manager",
    }))
    return store


@pytest.fixture
def registry():
    return RevocationRegistry()


@pytest.fixture
def gate(tokens, registry, store):
    return AccessGate(tokens, registry, store)


def authorize(gate, method, token):
    return asyncio.run(gate.authorize(method, token))


def denial(gate, method, token) -> str:
    with pytest.raises(AuthError) as exc_info:
        authorize(gate, method, token)
    assert exc_info.value.status_code == 401
    return exc_info.value.message


class TestAccessGate:
    """Tests for each gate outcome."""

    @pytest.mark.parametrize("method", ["get", "GET", "head", "options", "patch"])
    def test_non_write_methods_skip_auth(self, gate, store, method):
        assert authorize(gate, method, None) is None
        assert store.lookups == 0

    @pytest.mark.parametrize("method", ["post", "PUT", "delete"])
    def test_missing_token_denied_before_store(self, gate, store, method):
        assert denial(gate, method, None) == "Missing token"
        assert denial(gate, method, "") == "Missing token"
        assert store.lookups == 0

    def test_revoked_token(self, gate, tokens, registry, store):
        token = tokens.issue({"id": 1, "email": "ada@example.com"})
        registry.revoke(token, tokens.verify(token).expires_at_ms)
        assert denial(gate, "post", token) == "You're logged out"
        assert store.lookups == 0

    def test_invalid_token(self, gate, store):
        assert denial(gate, "put", "not-a-token") == "Invalid token"
        assert store.lookups == 0

    def test_unknown_principal(self, gate, tokens):
        token = tokens.issue({"id": 99, "email": "ghost@example.com"})
        assert denial(gate, "delete", token) == "Unauthorised"

    def test_store_failure_is_unauthorised(self, tokens, registry):
        gate = AccessGate(tokens, registry, RecordingStore(fail=True))
        token = tokens.issue({"id": 1, "email": "ada@example.com"})
        assert denial(gate, "post", token) == "Unauthorised"

    def test_valid_token_resolves_principal(self, gate, tokens, store):
        token = tokens.issue({"id": 1, "email": "ada@example.com"})

        async def scenario():
            principal = await gate.authorize("post", token)
            return principal, get_current_principal()

        principal, current = asyncio.run(scenario())
        assert principal.id == 1
        assert principal.email == "ada@example.com"
        assert principal.role.value == "manager"
        assert current == principal
        assert store.lookups == 1
