from finintake.config.settings import Settings
from finintake.database.repositories.event_repository import EventRepository
from finintake.dispatch.events import UploadEvent
from finintake.logging.logger import Log
from finintake.processor.processor import Processor


class JobRunner:
    """Run one processing job for one event, catch exceptions, and apply retry logic."""

    def __init__(
        self,
        processor: Processor,
        event_repo: EventRepository,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._event_repo = event_repo
        self._settings = settings

    def run(self, event: UploadEvent) -> None:
        """Execute a single event with error handling."""
        Log.info(f"Running {event.name} event {event.event_id} (attempt {event.attempts + 1})")
        try:
            self._processor.process(event.document_id, event.file_path)
            self._event_repo.mark_done(event.event_id)
            Log.info(f"Event {event.event_id} completed successfully")
        except Exception as exc:
            self._handle_failure(event, exc)

    def _handle_failure(self, event: UploadEvent, exc: Exception) -> None:
        """Increment attempts; mark failed if at max, otherwise back to pending."""
        Log.error(f"Event {event.event_id} failed: {exc}", document_id=event.document_id)
        if event.attempts + 1 >= self._settings.max_event_attempts:
            self._event_repo.mark_failed(event.event_id, str(exc))
            Log.error(
                f"Event {event.event_id} permanently failed after {event.attempts + 1} attempts"
            )
        else:
            self._event_repo.increment_attempts(event.event_id, str(exc))
            Log.warning(f"Event {event.event_id} will be retried (attempt {event.attempts + 1})")
