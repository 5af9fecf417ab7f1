"""Unit tests for the generic CRUD dispatcher."""

import asyncio

import pytest

from unidir.auth.passwords import PasswordHasher
from unidir.core.entities import EntityKind
from unidir.core.errors import NotAllowedError, StoreError, ValidationError
from unidir.runtime.services.crud import DirectoryRequest, build_handler_sets
from unidir.runtime.storage.memory import InMemoryDirectoryStore

IELTS = {"reading": 6.5, "listening": 7, "writing": 6, "speaking": 6, "overall": 6.5}


@pytest.fixture
def store():
    return InMemoryDirectoryStore()


@pytest.fixture
def handlers(store):
    return build_handler_sets(store, PasswordHasher(rounds=4))


def run(handler_set, method, **kwargs):
    return asyncio.run(handler_set.dispatch(DirectoryRequest(method=method, **kwargs)))


class TestHandlerSets:
    """Tests for the handler set registry."""

    def test_every_entity_kind_has_handlers(self, handlers):
        assert set(handlers) == set(EntityKind)
        for kind, handler_set in handlers.items():
            assert handler_set.kind is kind
            assert handler_set.methods == {"post", "get", "put", "delete"}

    def test_registry_is_read_only(self, handlers):
        with pytest.raises(TypeError):
            handlers[EntityKind.PTE] = None


class TestCreate:
    """Tests for create."""

    def test_create_returns_id(self, handlers):
        result = run(handlers[EntityKind.IELTS], "post", payload=IELTS)
        assert result.status_code == 200
        assert result.body == {"message": "Ielts created successfully", "result": {"id": 1}}

    def test_invalid_payload_is_rejected_with_field_errors(self, handlers, store):
        with pytest.raises(ValidationError) as exc_info:
            run(handlers[EntityKind.IELTS], "post", payload={**IELTS, "overall": 12})
        assert exc_info.value.message == "Invalid input"
        assert exc_info.value.errors[0]["field"] == "overall"
        assert asyncio.run(store.get(EntityKind.IELTS, 1)) is None

    def test_store_failure_propagates(self, handlers):
        course = {
            "name": "MIT", "university_id": 99, "fees": 40000,
            "duration": 24, "intake": "Feb", "link": "https://example.edu/mit",
        }
        with pytest.raises(StoreError) as exc_info:
            run(handlers[EntityKind.COURSE], "post", payload=course)
        assert exc_info.value.to_body() == {"message": "Error: FOREIGN KEY constraint failed"}


class TestRead:
    """Tests for read."""

    def test_missing_row_is_null_result(self, handlers):
        result = run(handlers[EntityKind.IELTS], "get", query={"id": "7"})
        assert result.status_code == 200
        assert result.body["result"] is None

    def test_existing_row(self, handlers):
        run(handlers[EntityKind.IELTS], "post", payload=IELTS)
        result = run(handlers[EntityKind.IELTS], "get", query={"id": "1"})
        assert result.body["message"] == "Ielts retrieved successfully"
        assert result.body["result"]["overall"] == 6.5

    @pytest.mark.parametrize("query", [{}, {"id": ""}, {"id": "  "}, {"id": "abc"}])
    def test_invalid_id(self, handlers, query):
        with pytest.raises(ValidationError, match="Invalid ID"):
            run(handlers[EntityKind.IELTS], "get", query=query)


class TestUpdate:
    """Tests for update."""

    def test_updates_only_valid_fields(self, handlers, store):
        run(handlers[EntityKind.IELTS], "post", payload=IELTS)
        result = run(
            handlers[EntityKind.IELTS],
            "put",
            payload={"id": "1", "overall": 7.5, "reading": 0, "writing": ""},
        )
        assert result.body["message"] == "Ielts updated successfully"
        row = asyncio.run(store.get(EntityKind.IELTS, 1))
        assert row["overall"] == 7.5
        assert row["reading"] == 6.5

    def test_no_valid_fields(self, handlers):
        with pytest.raises(ValidationError, match="No valid fields to update"):
            run(handlers[EntityKind.IELTS], "put", payload={"id": 1, "overall": 0, "reading": -1, "writing": ""})

    def test_missing_id(self, handlers):
        with pytest.raises(ValidationError, match="Invalid ID"):
            run(handlers[EntityKind.IELTS], "put", payload={"overall": 7})

    def test_out_of_range_update(self, handlers):
        with pytest.raises(ValidationError) as exc_info:
            run(handlers[EntityKind.IELTS], "put", payload={"id": 1, "overall": 10})
        assert exc_info.value.errors[0]["field"] == "overall"


class TestDelete:
    """Tests for delete."""

    def test_delete(self, handlers, store):
        run(handlers[EntityKind.IELTS], "post", payload=IELTS)
        result = run(handlers[EntityKind.IELTS], "delete", query={"id": "1"})
        assert result.body["message"] == "Ielts deleted successfully"
        assert asyncio.run(store.get(EntityKind.IELTS, 1)) is None

    def test_missing_id(self, handlers):
        with pytest.raises(ValidationError, match="Invalid ID"):
            run(handlers[EntityKind.IELTS], "delete")


class TestDispatch:
    """Tests for method dispatch."""

    @pytest.mark.parametrize("method", ["patch", "options", "trace"])
    def test_unsupported_method(self, handlers, method):
        with pytest.raises(NotAllowedError):
            run(handlers[EntityKind.UNIVERSITY], method)

    def test_method_is_case_insensitive(self, handlers):
        assert handlers[EntityKind.PTE].handler_for("GET") is not None


class TestUserBinding:
    """Tests for password handling on users."""

    def test_password_is_hashed_and_hidden(self, handlers, store):
        payload = {"name": "Sam", "email": "sam@example.com", "password": "hunter22", "role": "student"}
        created = run(handlers[EntityKind.USER], "post", payload=payload)
        user_id = created.body["result"]["id"]

        stored = asyncio.run(store.get(EntityKind.USER, user_id))
        assert stored["password"].startswith("$2")
        assert PasswordHasher().verify("hunter22", stored["password"])

        read = run(handlers[EntityKind.USER], "get", query={"id": str(user_id)})
        assert "password" not in read.body["result"]
        assert read.body["result"]["email"] == "sam@example.com"

    def test_password_update_is_hashed(self, handlers, store):
        payload = {"name": "Sam", "email": "sam@example.com", "password": "hunter22", "role": "student"}
        run(handlers[EntityKind.USER], "post", payload=payload)
        run(handlers[EntityKind.USER], "put", payload={"id": 1, "password": "new-password"})

        stored = asyncio.run(store.get(EntityKind.USER, 1))
        assert PasswordHasher().verify("new-password", stored["password"])
