import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial

from finintake.config.settings import Settings
from finintake.dispatch.events import AUDIO_UPLOADED, DOCUMENT_UPLOADED, UploadEvent
from finintake.dispatch.exceptions import UnknownEventError
from finintake.dispatch.rate_limiter import SlidingWindowRateLimiter
from finintake.logging.logger import Log


@dataclass
class DispatchLane:
    """Handler, rate ceiling and worker threads for one event name."""

    event_name: str
    handler: Callable[[UploadEvent], None]
    limiter: SlidingWindowRateLimiter
    max_workers: int = 1


class JobDispatcher:
    """Queues events per lane and starts their jobs no faster than the lane's ceiling.

    Events beyond the ceiling wait in the lane's queue; nothing is dropped and
    nothing starts over capacity. Lanes do not wait on each other.
    """

    def __init__(self, lanes: Sequence[DispatchLane]) -> None:
        self._lanes = {lane.event_name: lane for lane in lanes}
        self._executors = {
            lane.event_name: ThreadPoolExecutor(
                max_workers=lane.max_workers,
                thread_name_prefix=f"finintake-{lane.event_name.rsplit('/', 1)[-1]}",
            )
            for lane in lanes
        }
        self._pending = {lane.event_name: 0 for lane in lanes}
        self._lock = threading.Lock()

    @property
    def event_names(self) -> list[str]:
        return list(self._lanes)

    def dispatch(self, event: UploadEvent) -> Future[None]:
        """Queue an event on its lane.

        Raises:
            UnknownEventError: if no lane is registered for the event name.
        """
        lane = self._lanes.get(event.name)
        if lane is None:
            raise UnknownEventError(
                f"No job registered for event '{event.name}'. "
                f"Known events: {sorted(self._lanes)}"
            )
        with self._lock:
            self._pending[event.name] += 1
        Log.debug(f"Queued {event.name} for document {event.document_id}")
        future = self._executors[event.name].submit(self._run, lane, event)
        future.add_done_callback(partial(self._on_done, event.name))
        return future

    def pending_count(self, event_name: str | None = None) -> int:
        """Events queued or running on one lane, or across all lanes."""
        with self._lock:
            if event_name is None:
                return sum(self._pending.values())
            return self._pending.get(event_name, 0)

    def saturated_lanes(self, max_pending: int) -> list[str]:
        """Event names whose lane already holds max_pending queued or running jobs."""
        with self._lock:
            return [name for name, count in self._pending.items() if count >= max_pending]

    def shutdown(self, wait: bool = True) -> None:
        """Stop all lanes. With wait=False, queued events that have not started are cancelled."""
        for executor in self._executors.values():
            executor.shutdown(wait=wait, cancel_futures=not wait)

    @staticmethod
    def _run(lane: DispatchLane, event: UploadEvent) -> None:
        lane.limiter.acquire()
        Log.info(f"Starting {event.name} job for document {event.document_id}")
        lane.handler(event)

    def _on_done(self, event_name: str, future: Future[None]) -> None:
        with self._lock:
            self._pending[event_name] -= 1
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            Log.error(f"Dispatched job raised: {exc}")


def build_dispatcher(
    settings: Settings,
    document_handler: Callable[[UploadEvent], None],
    audio_handler: Callable[[UploadEvent], None],
) -> JobDispatcher:
    """Two lanes: documents and audio, each with its own per-minute ceiling."""
    period = settings.rate_limit_period_seconds
    return JobDispatcher(
        [
            DispatchLane(
                event_name=DOCUMENT_UPLOADED,
                handler=document_handler,
                limiter=SlidingWindowRateLimiter(
                    settings.document_rate_limit_per_minute, period, name="documents"
                ),
                max_workers=settings.document_rate_limit_per_minute,
            ),
            DispatchLane(
                event_name=AUDIO_UPLOADED,
                handler=audio_handler,
                limiter=SlidingWindowRateLimiter(
                    settings.audio_rate_limit_per_minute, period, name="audio"
                ),
                max_workers=settings.audio_rate_limit_per_minute,
            ),
        ]
    )
