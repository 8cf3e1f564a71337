from collections.abc import Sequence
from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from finintake.database.connection import get_connection
from finintake.database.models import (
    EVENT_STATUS_DONE,
    EVENT_STATUS_FAILED,
    EVENT_STATUS_PENDING,
    EVENT_STATUS_PROCESSING,
    EventRecord,
)


class EventRepository:
    """Database operations for the upload_events table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def publish(self, name: str, payload: dict[str, Any]) -> int:
        """Append a pending event and return its ID."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO upload_events (name, payload, status)
                    VALUES (%s, %s, %s)
                    RETURNING id
                    """,
                    (name, Jsonb(payload), EVENT_STATUS_PENDING),
                )
                row = cur.fetchone()
            conn.commit()
        if row is None:
            raise RuntimeError("Insert into upload_events returned no row")
        return int(row[0])

    def claim_next_event(
        self,
        conn: psycopg.Connection[Any],
        skip_names: Sequence[str] = (),
    ) -> EventRecord | None:
        """Claim the oldest pending event using SELECT FOR UPDATE SKIP LOCKED.

        Events named in skip_names stay pending for a later poll.
        """
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                """
                SELECT id, name, payload, attempts
                FROM upload_events
                WHERE status = %s
                  AND attempts < %s
                  AND NOT (name = ANY(%s::text[]))
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (EVENT_STATUS_PENDING, self._max_attempts, list(skip_names)),
            )
            row = cur.fetchone()

        if row is None:
            conn.commit()
            return None

        conn.execute(
            """
            UPDATE upload_events
            SET status = %s, locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (EVENT_STATUS_PROCESSING, row["id"]),
        )
        conn.commit()

        return EventRecord(
            id=row["id"],
            name=row["name"],
            payload=row["payload"],
            status=EVENT_STATUS_PROCESSING,
            attempts=row["attempts"],
        )

    def mark_done(self, event_id: int) -> None:
        """Mark an event as handled."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE upload_events
                SET status = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (EVENT_STATUS_DONE, event_id),
            )
            conn.commit()

    def mark_failed(self, event_id: int, error: str) -> None:
        """Mark an event as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE upload_events
                SET status = %s, attempts = attempts + 1,
                    error_message = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (EVENT_STATUS_FAILED, error, event_id),
            )
            conn.commit()

    def increment_attempts(self, event_id: int, error: str) -> None:
        """Increment attempt count and return the event to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE upload_events
                SET attempts = attempts + 1, status = %s, error_message = %s,
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (EVENT_STATUS_PENDING, error, event_id),
            )
            conn.commit()

    def find_by_id(self, event_id: int) -> EventRecord | None:
        """Find an event by ID. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    """
                    SELECT id, name, payload, status, attempts,
                           error_message, locked_at, created_at, updated_at
                    FROM upload_events
                    WHERE id = %s
                    """,
                    (event_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None

        return EventRecord(
            id=row["id"],
            name=row["name"],
            payload=row["payload"],
            status=row["status"],
            attempts=row["attempts"],
            error_message=row["error_message"],
            locked_at=row["locked_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
