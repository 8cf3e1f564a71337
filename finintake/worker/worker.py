import time
from collections.abc import Sequence

from finintake.config.settings import Settings
from finintake.database.connection import get_connection
from finintake.database.models import EventRecord
from finintake.database.repositories.event_repository import EventRepository
from finintake.dispatch.dispatcher import JobDispatcher
from finintake.dispatch.events import UploadEvent
from finintake.dispatch.exceptions import DispatchError
from finintake.logging.logger import Log


class Worker:
    """Poll loop: sleep -> claim -> dispatch."""

    def __init__(
        self,
        event_repo: EventRepository,
        dispatcher: JobDispatcher,
        settings: Settings,
    ) -> None:
        self._event_repo = event_repo
        self._dispatcher = dispatcher
        self._settings = settings

    def run(self, max_events: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        Events for a lane whose back-log is full are left pending; other lanes
        keep being fed. If max_events is set, stop after dispatching that many
        events (for testing).
        """
        Log.info("Worker started, polling for upload events")
        dispatched = 0
        try:
            while max_events is None or dispatched < max_events:
                saturated = self._dispatcher.saturated_lanes(
                    self._settings.dispatcher_max_pending
                )
                if len(saturated) == len(self._dispatcher.event_names):
                    Log.debug("All dispatcher lanes are full, sleeping")
                    time.sleep(self._settings.event_poll_interval_seconds)
                    continue
                record = self._try_claim_event(saturated)
                if record is None:
                    Log.debug("No events available, sleeping")
                    time.sleep(self._settings.event_poll_interval_seconds)
                    continue
                if self._dispatch(record):
                    dispatched += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _dispatch(self, record: EventRecord) -> bool:
        try:
            event = UploadEvent.from_record(record)
            self._dispatcher.dispatch(event)
        except DispatchError as exc:
            Log.error(f"Event {record.id} rejected: {exc}", event_name=record.name)
            self._event_repo.mark_failed(record.id, str(exc))
            return False
        return True

    def _try_claim_event(self, skip_names: Sequence[str] = ()) -> EventRecord | None:
        """Attempt to claim the next pending event. Gracefully handle DB errors."""
        try:
            with get_connection() as conn:
                return self._event_repo.claim_next_event(conn, skip_names)
        except Exception as exc:
            Log.warning(f"Database error, will retry: {exc}")
            return None
