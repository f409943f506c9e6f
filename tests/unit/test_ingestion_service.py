"""
Unit tests for catalog ingestion with fuzzy de-duplication
"""
from typing import List

import pytest

from accessmenu.core.exceptions import ErrorCode
from accessmenu.services.catalog_store import CatalogEntry, CatalogStore, SqlCatalogStore
from accessmenu.services.ingestion_service import DishIngestionService, DishSubmission


class MemoryStore(CatalogStore):
    def __init__(self, names=None, fail_reads=False, fail_writes=False):
        self.entries: List[CatalogEntry] = [
            CatalogEntry(name=n, language="en", menu_language="en", explanation="...") for n in (names or [])
        ]
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def list_names(self, language):
        if self.fail_reads:
            raise ConnectionError("catalog offline")
        return [e.name for e in self.entries if e.language == language]

    def insert_dish(self, entry):
        if self.fail_writes:
            return False
        self.entries.append(entry)
        return True


def submission(name, **kwargs):
    return DishSubmission(name=name, explanation=kwargs.pop("explanation", "A dish"), **kwargs)


def test_new_dish_is_saved():
    store = MemoryStore(["Pad Thai"])
    service = DishIngestionService(store)

    result = service.ingest(submission("Gỏi cuốn", tags=["spring roll"], cuisine="vietnamese", source="extension"))

    assert result.saved
    assert not result.dish_exists
    assert result.error is None
    saved = store.entries[-1]
    assert saved.name == "Gỏi cuốn"
    assert saved.language == "en"
    assert saved.menu_language == "vi"
    assert saved.tags == ["spring roll"]
    assert saved.source == "extension"


def test_near_duplicate_is_not_saved():
    store = MemoryStore(["Tom Yum Soup", "Pad Thai"])
    service = DishIngestionService(store)

    result = service.ingest(submission("tom yum soup!"))

    assert result.dish_exists
    assert not result.saved
    assert result.matched_name == "Tom Yum Soup"
    assert result.similarity == 1.0
    assert len(store.entries) == 2


def test_duplicates_are_checked_per_language():
    store = MemoryStore(["Pad Thai"])
    service = DishIngestionService(store)

    result = service.ingest(submission("Pad Thai", language="es", explanation="Fideos salteados"))

    assert result.saved
    assert store.entries[-1].language == "es"


def test_read_failure_is_treated_as_empty_catalog():
    store = MemoryStore(["Pad Thai"], fail_reads=True)
    result = DishIngestionService(store).ingest(submission("Pad Thai"))
    assert result.saved


def test_write_failure_reports_error():
    store = MemoryStore(fail_writes=True)
    result = DishIngestionService(store).ingest(submission("Larb"))
    assert not result.saved
    assert result.error == ErrorCode.CATALOG_WRITE_FAILED


@pytest.mark.parametrize("name,explanation", [("  ", "text"), ("Larb", "   ")])
def test_invalid_submission(name, explanation):
    store = MemoryStore()
    result = DishIngestionService(store).ingest(DishSubmission(name=name, explanation=explanation))
    assert result.error == ErrorCode.VALIDATION_ERROR
    assert store.entries == []


def test_ingest_into_sql_store(session_factory):
    service = DishIngestionService(SqlCatalogStore(session_factory))

    first = service.ingest(submission("Massaman Curry"))
    second = service.ingest(submission("Massaman  curry."))

    assert first.saved
    assert second.dish_exists
    assert second.matched_name == "Massaman Curry"
