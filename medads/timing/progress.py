"""Simulated progress reporting while an answer is generated.

A ``ProgressTracker`` owns at most one tracking session at a time. Each
session ticks on a fixed interval, maps elapsed time onto a non-linear
progress curve and publishes ``ProgressEvent`` updates to synchronous
listeners and to async-iterable subscriptions. Subscriptions end after the
session's final event.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from medads.timing.models import ProgressEvent, ProgressStage

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 0.5
MIN_REMAINING_MS = 500
ANALYZING_UNTIL = 15
GENERATING_UNTIL = 85
OVERRUN_RATIO = 1.2

ProgressListener = Callable[[ProgressEvent], None]

_END = object()


def simulate_progress(normalized_time: float) -> int:
    """Map elapsed/estimated time onto a 0-100 progress value.

    Fast through analysis, steady through generation, slow while refining.
    Past 1.2x the estimate progress reads 100.
    """
    if normalized_time > OVERRUN_RATIO:
        return 100

    t = max(0.0, min(normalized_time, 1.0))
    if t < 0.2:
        progress = t * 75
    elif t < 0.8:
        progress = 15 + ((t - 0.2) / 0.6) * 70
    else:
        progress = 85 + ((t - 0.8) / 0.2) * 15

    return min(int(progress + 0.5), 100)


def stage_for_progress(progress: float) -> ProgressStage:
    if progress < ANALYZING_UNTIL:
        return ProgressStage.ANALYZING
    if progress < GENERATING_UNTIL:
        return ProgressStage.GENERATING
    return ProgressStage.REFINING


def remaining_time_ms(progress: float, elapsed_ms: float, total_ms: float) -> float:
    """Remaining time, scaled by how actual pace compares to the estimate."""
    if progress >= 100:
        return 0.0
    if progress <= 0:
        return total_ms

    expected_elapsed = (progress / 100) * total_ms
    pace = elapsed_ms / expected_elapsed
    expected_remaining = ((100 - progress) / 100) * total_ms
    return max(MIN_REMAINING_MS, expected_remaining * pace)


class ProgressSubscription:
    """Async iterator over one tracker's progress events.

    Iteration stops after the final event of the session, or once the
    subscription is closed.
    """

    def __init__(self, tracker: "ProgressTracker"):
        self._tracker = tracker
        self._queue: asyncio.Queue = asyncio.Queue()
        self._finished = False

    def publish(self, event: ProgressEvent) -> None:
        self._queue.put_nowait(event)

    def end(self) -> None:
        self._queue.put_nowait(_END)

    def close(self) -> None:
        """Stop receiving events; pending events are still delivered."""
        self._tracker.unsubscribe(self)

    def __aiter__(self) -> "ProgressSubscription":
        return self

    async def __anext__(self) -> ProgressEvent:
        if self._finished:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is _END:
            self._finished = True
            raise StopAsyncIteration
        return item


class ProgressTracker:
    """Drives one simulated progress session at a time."""

    def __init__(
        self,
        interval: float = TICK_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the tracker.

        Args:
            interval: Seconds between ticks
            clock: Monotonic clock in seconds, replaceable for tests
        """
        self.interval = interval
        self._clock = clock
        self._listeners: list[ProgressListener] = []
        self._subscriptions: list[ProgressSubscription] = []
        self._task: asyncio.Task | None = None
        self._active = False
        self._start_time = 0.0
        self._total_ms = 0.0
        self.current_progress = 0

    @property
    def is_active(self) -> bool:
        return self._active

    def start_progress_tracking(self, estimated_seconds: float) -> None:
        """Start a new session, replacing any session in progress.

        Must be called from a running event loop.
        """
        if estimated_seconds <= 0:
            raise ValueError("Estimated time must be positive")

        self.stop_progress_tracking()
        self.current_progress = 0
        self._start_time = self._clock()
        self._total_ms = estimated_seconds * 1000
        self._active = True
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(f"Started progress tracking for {estimated_seconds}s")

    async def _run(self) -> None:
        while self._active:
            await asyncio.sleep(self.interval)
            self.tick()

    def tick(self) -> ProgressEvent | None:
        """Compute and publish one progress update for the active session."""
        if not self._active:
            return None

        elapsed_ms = (self._clock() - self._start_time) * 1000
        progress = simulate_progress(elapsed_ms / self._total_ms)
        self.current_progress = max(self.current_progress, progress)

        event = self._publish(elapsed_ms)
        if self.current_progress >= 100:
            self._end_session()
        return event

    def update_progress(self, progress: float) -> ProgressEvent | None:
        """Report real progress; never moves the session backwards."""
        if not self._active:
            return None

        value = int(max(0, min(progress, 100)))
        self.current_progress = max(self.current_progress, value)
        event = self._publish((self._clock() - self._start_time) * 1000)
        if self.current_progress >= 100:
            self._end_session()
        return event

    def complete_progress(self) -> None:
        """Publish a final 100% event and end the session."""
        self.current_progress = 100
        self._notify(
            ProgressEvent(progress=100, estimated_time_remaining=0, stage=ProgressStage.REFINING)
        )
        self._end_session()

    def stop_progress_tracking(self) -> None:
        """End the current session, if any. Safe to call repeatedly."""
        self._end_session()

    def add_progress_listener(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def remove_progress_listener(self, listener: ProgressListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def subscribe(self) -> ProgressSubscription:
        """Subscribe to events of the current session."""
        subscription = ProgressSubscription(self)
        if self._active:
            self._subscriptions.append(subscription)
        else:
            subscription.end()
        return subscription

    def unsubscribe(self, subscription: ProgressSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            subscription.end()

    def _publish(self, elapsed_ms: float) -> ProgressEvent:
        remaining = remaining_time_ms(self.current_progress, elapsed_ms, self._total_ms)
        event = ProgressEvent(
            progress=self.current_progress,
            estimated_time_remaining=int(remaining / 1000 + 0.5),
            stage=stage_for_progress(self.current_progress),
        )
        self._notify(event)
        return event

    def _notify(self, event: ProgressEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Progress listener failed: {e}")

        for subscription in self._subscriptions:
            subscription.publish(event)

    def _end_session(self) -> None:
        self._active = False

        task, self._task = self._task, None
        if task is not None and not task.done():
            try:
                current = asyncio.current_task()
            except RuntimeError:
                current = None
            if task is not current:
                task.cancel()

        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            subscription.end()
