import uuid
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from finintake.database.connection import get_connection
from finintake.database.models import (
    MEDIA_KIND_AUDIO,
    MEDIA_KIND_DOCUMENT,
    STATUS_COMPLETED,
    STATUS_FAILED,
    STATUS_PROCESSING,
    DocumentRecord,
)
from finintake.extraction.models import ExtractionResult
from finintake.processor.exceptions import PersistenceError, RecordNotFoundError

_SELECT_COLUMNS = """
    id, file_name, file_path, media_kind, status, uploaded_at,
    document_type, invoice_number, invoice_date, due_date,
    vendor_name, vendor_address, client_name, client_address,
    subtotal, tax_amount, total_amount, currency, line_items,
    transcript, sentiment, speakers, topics,
    processing_error, processed_at
"""


class FinancialDocumentRepository:
    """Database operations for the financial_documents table."""

    def create(self, file_name: str, file_path: str, media_kind: str) -> DocumentRecord:
        """Insert a freshly uploaded document in PROCESSING status."""
        if media_kind not in (MEDIA_KIND_DOCUMENT, MEDIA_KIND_AUDIO):
            raise ValueError(f"Unknown media kind '{media_kind}'")
        document_id = str(uuid.uuid4())
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO financial_documents
                            (id, file_name, file_path, media_kind, status)
                        VALUES (%s, %s, %s, %s, %s)
                        RETURNING {_SELECT_COLUMNS}
                        """,
                        (document_id, file_name, file_path, media_kind, STATUS_PROCESSING),
                    )
                    row = cur.fetchone()
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to create document record: {exc}") from exc

        if row is None:
            raise PersistenceError("Insert returned no row")
        return _row_to_record(row)

    def find_by_id(self, document_id: str) -> DocumentRecord:
        """Find a document by ID.

        Raises:
            RecordNotFoundError: if no document with this ID exists.
        """
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {_SELECT_COLUMNS} FROM financial_documents WHERE id = %s",
                        (document_id,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to load document {document_id}: {exc}") from exc

        if row is None:
            raise RecordNotFoundError(f"Document with ID {document_id} not found")
        return _row_to_record(row)

    def list_by_status(self, status: str | None = None, limit: int = 100) -> list[DocumentRecord]:
        """List documents, newest upload first, optionally filtered by status."""
        query = f"SELECT {_SELECT_COLUMNS} FROM financial_documents"
        params: tuple[Any, ...] = (limit,)
        if status is not None:
            query += " WHERE status = %s"
            params = (status, limit)
        query += " ORDER BY uploaded_at DESC LIMIT %s"
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to list documents: {exc}") from exc
        return [_row_to_record(row) for row in rows]

    def mark_completed(self, document_id: str, result: ExtractionResult) -> None:
        """Persist extracted fields, COMPLETED status and processed_at.

        Raises:
            RecordNotFoundError: if no document with this ID exists.
            PersistenceError: if the write itself fails.
        """
        columns = result.as_columns()
        assignments = ", ".join(f"{column} = %s" for column in columns)
        values = [_adapt(value) for value in columns.values()]
        self._update(
            document_id,
            f"""
            UPDATE financial_documents
            SET {assignments},
                status = %s,
                processing_error = NULL,
                processed_at = NOW()
            WHERE id = %s AND media_kind = %s
            """,
            (*values, STATUS_COMPLETED, document_id, result.media_kind),
            not_found=f"Document with ID {document_id} and media kind {result.media_kind} not found",
        )

    def mark_failed(self, document_id: str, error: str) -> None:
        """Persist FAILED status, the error message and processed_at.

        Raises:
            RecordNotFoundError: if no document with this ID exists.
            PersistenceError: if the write itself fails.
        """
        self._update(
            document_id,
            """
            UPDATE financial_documents
            SET status = %s, processing_error = %s, processed_at = NOW()
            WHERE id = %s
            """,
            (STATUS_FAILED, error, document_id),
        )

    def _update(
        self,
        document_id: str,
        query: str,
        params: Sequence[Any],
        not_found: str | None = None,
    ) -> None:
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, params)
                    if cur.rowcount == 0:
                        raise RecordNotFoundError(
                            not_found or f"Document with ID {document_id} not found"
                        )
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to update document {document_id}: {exc}") from exc


def _adapt(value: Any) -> Any:
    if isinstance(value, (list, dict)):
        return Jsonb(value)
    return value


def _to_float(value: Decimal | float | None) -> float | None:
    return float(value) if value is not None else None


def _row_to_record(row: dict[str, Any]) -> DocumentRecord:
    return DocumentRecord(
        id=row["id"],
        file_name=row["file_name"],
        file_path=row["file_path"],
        media_kind=row["media_kind"],
        status=row["status"],
        uploaded_at=row["uploaded_at"],
        document_type=row["document_type"],
        invoice_number=row["invoice_number"],
        invoice_date=row["invoice_date"],
        due_date=row["due_date"],
        vendor_name=row["vendor_name"],
        vendor_address=row["vendor_address"],
        client_name=row["client_name"],
        client_address=row["client_address"],
        subtotal=_to_float(row["subtotal"]),
        tax_amount=_to_float(row["tax_amount"]),
        total_amount=_to_float(row["total_amount"]),
        currency=row["currency"],
        line_items=row["line_items"] or [],
        transcript=row["transcript"],
        sentiment=row["sentiment"],
        speakers=row["speakers"] or [],
        topics=row["topics"] or [],
        processing_error=row["processing_error"],
        processed_at=row["processed_at"],
    )
