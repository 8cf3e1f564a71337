import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import psycopg
import pytest

from finintake.config.settings import Settings
from finintake.database.connection import apply_schema, close_pool, get_connection, init_pool
from finintake.database.models import MEDIA_KIND_AUDIO, MEDIA_KIND_DOCUMENT, DocumentRecord
from finintake.database.repositories.document_repository import FinancialDocumentRepository


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "finintake_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to point at one")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(
    integration_pool: None,
) -> Generator[list[tuple[str, Any]], None, None]:
    cleanup: list[tuple[str, Any]] = []
    yield cleanup
    if not cleanup:
        return
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table, row_id in cleanup:
                if table == "upload_events":
                    cur.execute("DELETE FROM upload_events WHERE id = %s", (row_id,))
            for table, row_id in cleanup:
                if table == "financial_documents":
                    cur.execute("DELETE FROM financial_documents WHERE id = %s", (row_id,))
        conn.commit()


@pytest.fixture
def seed_document(
    integration_cleanup: list[tuple[str, Any]],
    invoice_file: Path,
) -> DocumentRecord:
    record = FinancialDocumentRepository().create(
        invoice_file.name, str(invoice_file), MEDIA_KIND_DOCUMENT
    )
    integration_cleanup.append(("financial_documents", record.id))
    return record


@pytest.fixture
def seed_audio(
    integration_cleanup: list[tuple[str, Any]],
    audio_file: Path,
) -> DocumentRecord:
    record = FinancialDocumentRepository().create(
        audio_file.name, str(audio_file), MEDIA_KIND_AUDIO
    )
    integration_cleanup.append(("financial_documents", record.id))
    return record
