import threading
import time
from unittest.mock import MagicMock

import pytest

from finintake.config.settings import Settings
from finintake.dispatch.dispatcher import DispatchLane, JobDispatcher, build_dispatcher
from finintake.dispatch.events import AUDIO_UPLOADED, DOCUMENT_UPLOADED, UploadEvent
from finintake.dispatch.exceptions import UnknownEventError
from finintake.dispatch.rate_limiter import SlidingWindowRateLimiter


def _event(name: str = DOCUMENT_UPLOADED, document_id: str = "d1") -> UploadEvent:
    return UploadEvent(event_id=1, name=name, document_id=document_id, file_path="/tmp/a.txt")


def _lane(name: str, handler: MagicMock, limit: int = 5) -> DispatchLane:
    return DispatchLane(
        event_name=name,
        handler=handler,
        limiter=SlidingWindowRateLimiter(limit, 60),
        max_workers=1,
    )


class TestDispatch:
    def test_routes_event_to_its_lane(self) -> None:
        document_handler = MagicMock()
        audio_handler = MagicMock()
        dispatcher = JobDispatcher(
            [_lane(DOCUMENT_UPLOADED, document_handler), _lane(AUDIO_UPLOADED, audio_handler)]
        )
        event = _event(AUDIO_UPLOADED, "d2")

        dispatcher.dispatch(event).result(timeout=5)
        dispatcher.shutdown()

        audio_handler.assert_called_once_with(event)
        document_handler.assert_not_called()

    def test_unknown_event_is_rejected(self) -> None:
        dispatcher = JobDispatcher([_lane(DOCUMENT_UPLOADED, MagicMock())])

        with pytest.raises(UnknownEventError, match="app/video.uploaded"):
            dispatcher.dispatch(_event("app/video.uploaded"))
        assert dispatcher.pending_count() == 0
        dispatcher.shutdown()

    def test_acquires_rate_limit_before_running_handler(self) -> None:
        order: list[str] = []
        limiter = MagicMock(spec=SlidingWindowRateLimiter)
        limiter.acquire.side_effect = lambda: order.append("acquire")
        handler = MagicMock(side_effect=lambda event: order.append("handle"))
        dispatcher = JobDispatcher(
            [DispatchLane(event_name=DOCUMENT_UPLOADED, handler=handler, limiter=limiter)]
        )

        dispatcher.dispatch(_event()).result(timeout=5)
        dispatcher.shutdown()

        assert order == ["acquire", "handle"]

    def test_handler_error_does_not_stop_the_lane(self) -> None:
        handler = MagicMock(side_effect=[RuntimeError("boom"), None])
        dispatcher = JobDispatcher([_lane(DOCUMENT_UPLOADED, handler)])

        first = dispatcher.dispatch(_event(document_id="d1"))
        second = dispatcher.dispatch(_event(document_id="d2"))
        second.result(timeout=5)
        dispatcher.shutdown()

        assert isinstance(first.exception(), RuntimeError)
        assert handler.call_count == 2

    def test_pending_count_tracks_queued_and_running_jobs(self) -> None:
        release = threading.Event()
        started = threading.Event()

        def handler(event: UploadEvent) -> None:
            started.set()
            release.wait(timeout=5)

        dispatcher = JobDispatcher([_lane(DOCUMENT_UPLOADED, MagicMock(side_effect=handler))])
        futures = [dispatcher.dispatch(_event(document_id=f"d{i}")) for i in range(3)]
        started.wait(timeout=5)

        assert dispatcher.pending_count() == 3
        assert dispatcher.pending_count(DOCUMENT_UPLOADED) == 3
        assert dispatcher.pending_count(AUDIO_UPLOADED) == 0

        release.set()
        for future in futures:
            future.result(timeout=5)
        dispatcher.shutdown()

        assert dispatcher.pending_count() == 0


class TestBuildDispatcher:
    def test_lanes_use_configured_ceilings(self) -> None:
        settings = Settings(
            _env_file=None,
            document_rate_limit_per_minute=5,
            audio_rate_limit_per_minute=2,
        )

        dispatcher = build_dispatcher(settings, MagicMock(), MagicMock())

        lanes = dispatcher._lanes
        assert set(lanes) == {DOCUMENT_UPLOADED, AUDIO_UPLOADED}
        assert lanes[DOCUMENT_UPLOADED].limiter.limit == 5
        assert lanes[AUDIO_UPLOADED].limiter.limit == 2
        assert lanes[DOCUMENT_UPLOADED].limiter.period_seconds == 60.0
        dispatcher.shutdown()


class TestSaturatedLanes:
    def test_reports_only_lanes_at_their_cap(self) -> None:
        release = threading.Event()

        def handler(event: UploadEvent) -> None:
            release.wait(timeout=5)

        dispatcher = JobDispatcher(
            [
                _lane(DOCUMENT_UPLOADED, MagicMock(side_effect=handler)),
                _lane(AUDIO_UPLOADED, MagicMock(side_effect=handler)),
            ]
        )
        futures = [dispatcher.dispatch(_event(AUDIO_UPLOADED, f"a{i}")) for i in range(2)]

        assert dispatcher.saturated_lanes(2) == [AUDIO_UPLOADED]
        assert dispatcher.saturated_lanes(3) == []
        assert dispatcher.event_names == [DOCUMENT_UPLOADED, AUDIO_UPLOADED]

        release.set()
        for future in futures:
            future.result(timeout=5)
        dispatcher.shutdown()


class TestCeilingQueueing:
    def test_events_over_the_ceiling_wait_for_the_window(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        clock = {"now": 1_700_000_000.0}
        clock_lock = threading.Lock()
        first_wave_started = threading.Event()

        def fake_time() -> float:
            return clock["now"]

        def fake_sleep(seconds: float) -> None:
            first_wave_started.wait(timeout=5)
            with clock_lock:
                clock["now"] += seconds

        monkeypatch.setattr(time, "time", fake_time)
        starts: list[float] = []
        starts_lock = threading.Lock()

        def handler(event: UploadEvent) -> None:
            with starts_lock:
                starts.append(fake_time())
                if len(starts) == 5:
                    first_wave_started.set()

        dispatcher = JobDispatcher(
            [
                DispatchLane(
                    event_name=DOCUMENT_UPLOADED,
                    handler=MagicMock(side_effect=handler),
                    limiter=SlidingWindowRateLimiter(5, 60, sleep=fake_sleep),
                    max_workers=5,
                )
            ]
        )

        futures = [dispatcher.dispatch(_event(document_id=f"d{i}")) for i in range(7)]
        for future in futures:
            future.result(timeout=5)
        dispatcher.shutdown()

        t0 = 1_700_000_000.0
        assert len(starts) == 7
        assert sorted(starts)[:5] == [t0] * 5
        assert all(start >= t0 + 60 for start in sorted(starts)[5:])
        assert dispatcher.pending_count() == 0
