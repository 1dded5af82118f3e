"""Tests for LibraryService persistence and CRUD."""

from pathlib import Path

from lambdaplay.domain.library import LIBRARY_KEY, ExpressionLibrary
from lambdaplay.infrastructure.store import (
    KeyValueStore,
    MemoryKeyValueStore,
    SqliteKeyValueStore,
)
from lambdaplay.services.library import LibraryService


class TestLoad:
    def test_missing_record_is_empty(self, library_service: LibraryService) -> None:
        assert len(library_service.library) == 0

    def test_unparsable_record_is_empty(self) -> None:
        store = MemoryKeyValueStore({LIBRARY_KEY: "{broken"})
        assert len(LibraryService(store).library) == 0

    def test_wrong_shape_record_is_empty(self) -> None:
        store = MemoryKeyValueStore({LIBRARY_KEY: '["id"]'})
        assert len(LibraryService(store).library) == 0

    def test_empty_body_record_is_empty(self) -> None:
        store = MemoryKeyValueStore({LIBRARY_KEY: '{"I": "λx.x", "x": ""}'})
        assert len(LibraryService(store).library) == 0

    def test_loads_in_stored_order(self) -> None:
        store = MemoryKeyValueStore({LIBRARY_KEY: '{"b": "2", "a": "1"}'})
        assert LibraryService(store).library.names() == ["b", "a"]

    def test_custom_key(self) -> None:
        store = MemoryKeyValueStore({"other": '{"id": "λx.x"}'})
        assert LibraryService(store, key="other").library.get("id") == "λx.x"


class TestSave:
    def test_save_persists(self, memory_store: MemoryKeyValueStore) -> None:
        result = LibraryService(memory_store).save(" id ", " λx.x ")
        assert result.ok
        assert result.data["name"] == "id"
        assert result.data["created"] is True
        assert memory_store.get(LIBRARY_KEY) == '{"id": "λx.x"}'

    def test_overwrite_reports_not_created(self, library_service: LibraryService) -> None:
        library_service.save("id", "λx.x")
        result = library_service.save("id", "λy.y")
        assert result.data["created"] is False
        assert library_service.library.as_pairs() == [("id", "λy.y")]

    def test_empty_name_fails(self, library_service: LibraryService) -> None:
        library_service.save("keep", "x")
        for name, body in (("", "x"), ("x", "")):
            result = library_service.save(name, body)
            assert not result.ok
            assert result.error is not None
            assert result.error.code == "VALIDATION_FAILED"
        assert library_service.library.as_pairs() == [("keep", "x")]

    def test_write_failure_is_warning(self, broken_store: KeyValueStore) -> None:
        service = LibraryService(broken_store)
        result = service.save("id", "λx.x")
        assert result.ok
        assert len(result.warnings) == 1
        assert service.library.get("id") == "λx.x"


class TestDelete:
    def test_delete_absent_is_ok(self, library_service: LibraryService) -> None:
        result = library_service.delete("ghost")
        assert result.ok
        assert result.data["removed"] is False

    def test_save_then_delete_restores(self, library_service: LibraryService) -> None:
        library_service.save("a", "1")
        library_service.save("b", "2")
        before = library_service.library
        library_service.save("id", "λx.x")
        library_service.delete("id")
        assert library_service.library == before

    def test_delete_to_empty_keeps_previous_record(
        self, memory_store: MemoryKeyValueStore
    ) -> None:
        service = LibraryService(memory_store)
        service.save("id", "λx.x")
        service.delete("id")
        assert len(service.library) == 0
        assert memory_store.get(LIBRARY_KEY) == '{"id": "λx.x"}'
        assert LibraryService(memory_store).library.names() == ["id"]


class TestReadOps:
    def test_list(self, library_service: LibraryService) -> None:
        library_service.save("K", "λx.λy.x")
        library_service.save("I", "λx.x")
        result = library_service.list_expressions()
        assert [item["name"] for item in result.data["items"]] == ["K", "I"]
        assert result.data["count"] == 2

    def test_show_missing(self, library_service: LibraryService) -> None:
        result = library_service.show("nope")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestRestart:
    def test_round_trip_through_sqlite(self, tmp_path: Path) -> None:
        data_dir = tmp_path / "data"
        store = SqliteKeyValueStore(data_dir)
        service = LibraryService(store)
        for name, body in (("z", "1"), ("a", "λx.x"), ("m", "λf.f f")):
            service.save(name, body)
        saved = service.library
        store.close()

        reopened = SqliteKeyValueStore(data_dir)
        try:
            loaded = LibraryService(reopened).library
        finally:
            reopened.close()
        assert loaded.as_pairs() == saved.as_pairs()
        assert isinstance(loaded, ExpressionLibrary)
