"""Timeline scrub/playback clock and frame scheduling."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """Something that runs callbacks on the next animation frame."""

    def request_frame(self, callback: FrameCallback) -> int: ...

    def cancel_frame(self, handle: int) -> None: ...


class ManualFrameScheduler:
    """Frame scheduler driven explicitly by the caller.

    Callbacks requested during a frame run on the following frame. Cancelled handles
    are skipped even if they were queued for the frame currently running.
    """

    def __init__(self) -> None:
        self._next_handle = 1
        self._pending: dict[int, FrameCallback] = {}
        self.frames_run = 0

    def request_frame(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        """Run callbacks pending at the start of this frame. Returns how many ran."""

        ran = 0
        for handle in sorted(self._pending):
            cb = self._pending.pop(handle, None)
            if cb is None:
                continue
            cb()
            ran += 1
        self.frames_run += 1
        return ran

    def run_until_idle(self, max_frames: int = 1_000_000, frame_rate: float | None = None) -> int:
        """Run frames until nothing is pending.

        Args:
            max_frames: Safety cap.
            frame_rate: If set, pace frames in wall-clock time (frames per second).

        Returns:
            Number of frames run.
        """

        frames = 0
        interval = 1.0 / frame_rate if frame_rate else 0.0
        while self._pending and frames < max_frames:
            started = time.perf_counter()
            self.run_frame()
            frames += 1
            if interval:
                time.sleep(max(0.0, interval - (time.perf_counter() - started)))
        return frames


@dataclass(frozen=True, slots=True)
class PlaybackParams:
    """Parameters controlling automatic playback."""

    # Wall-clock seconds for a full 0 -> 100 traversal at 1x, regardless of trip length.
    playback_seconds: float = 30.0
    frame_rate: float = 60.0
    step_percent: float = 5.0
    speeds: tuple[int, ...] = (1, 2, 4, 8)

    def increment(self, speed: int) -> float:
        """Percent advanced per frame at ``speed``."""

        return (speed * 100.0) / (self.playback_seconds * self.frame_rate)


class ClockState(str, Enum):
    IDLE = "idle"
    PAUSED = "paused"
    PLAYING = "playing"


ClockListener = Callable[["TimelineClock"], None]


def _clamp(value: float) -> float:
    return min(100.0, max(0.0, value))


class TimelineClock:
    """Scrub position over the trip, as a percentage of its duration.

    ``position`` is the single source of truth; ``current_ms`` is derived from it and
    the trip span. Idle means timeline mode is off and consumers show everything.

    Playback advances on frames requested from ``scheduler``. At most one tick is
    pending at any time; pause/reset/deactivate/play cancel it first.
    """

    def __init__(
        self,
        start_ms: int = 0,
        end_ms: int = 0,
        *,
        scheduler: FrameScheduler | None = None,
        params: PlaybackParams | None = None,
    ) -> None:
        self._params = params or PlaybackParams()
        self._scheduler = scheduler
        self._start_ms = start_ms
        self._end_ms = max(start_ms, end_ms)
        self._position: float | None = None
        self._playing = False
        self._speed = self._params.speeds[0]
        self._pending_tick: int | None = None
        self._listeners: list[ClockListener] = []

    # --- derived state -------------------------------------------------

    @property
    def params(self) -> PlaybackParams:
        return self._params

    @property
    def position(self) -> float | None:
        return self._position

    @property
    def active(self) -> bool:
        return self._position is not None

    @property
    def playing(self) -> bool:
        return self._playing

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def state(self) -> ClockState:
        if self._position is None:
            return ClockState.IDLE
        return ClockState.PLAYING if self._playing else ClockState.PAUSED

    @property
    def span(self) -> tuple[int, int]:
        return self._start_ms, self._end_ms

    @property
    def current_ms(self) -> int | None:
        """Timestamp at the current position, or None when Idle."""

        if self._position is None:
            return None
        return self._start_ms + int(round(self._position / 100.0 * (self._end_ms - self._start_ms)))

    @property
    def has_pending_tick(self) -> bool:
        return self._pending_tick is not None

    # --- observers -----------------------------------------------------

    def subscribe(self, listener: ClockListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe function."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- transitions ---------------------------------------------------

    def set_span(self, start_ms: int, end_ms: int) -> None:
        """Rebase onto a new trip span, keeping the percentage position."""

        self._start_ms = start_ms
        self._end_ms = max(start_ms, end_ms)
        self._notify()

    def activate(self) -> None:
        """Enter timeline mode, paused at the start of the trip."""

        self._cancel_tick()
        self._playing = False
        self._position = 0.0
        self._notify()

    def deactivate(self) -> None:
        self._cancel_tick()
        self._playing = False
        self._position = None
        self._notify()

    def seek(self, position: float) -> None:
        """Jump to ``position`` percent (clamped). Play state is unchanged."""

        if self._position is None:
            return
        self._position = _clamp(float(position))
        self._notify()

    def seek_ms(self, timestamp_ms: int) -> None:
        duration = self._end_ms - self._start_ms
        if duration <= 0:
            self.seek(100.0 if timestamp_ms >= self._start_ms else 0.0)
            return
        self.seek((timestamp_ms - self._start_ms) / duration * 100.0)

    def step_forward(self, delta: float | None = None) -> None:
        if self._position is None:
            return
        self.seek(self._position + (self._params.step_percent if delta is None else delta))

    def step_backward(self, delta: float | None = None) -> None:
        if self._position is None:
            return
        self.seek(self._position - (self._params.step_percent if delta is None else delta))

    def play(self) -> bool:
        """Start playback. Returns False if Idle, already playing or at the end."""

        if self._position is None or self._playing or self._position >= 100.0:
            return False
        self._cancel_tick()
        self._playing = True
        self._schedule_tick()
        self._notify()
        return True

    def pause(self) -> None:
        self._cancel_tick()
        if self._playing:
            self._playing = False
            self._notify()

    def reset(self) -> None:
        """Stop playback and rewind to the start (stays in timeline mode)."""

        self._cancel_tick()
        self._playing = False
        if self._position is not None:
            self._position = 0.0
        self._notify()

    def tick(self) -> None:
        """Advance one frame of playback; auto-stops at 100."""

        self._pending_tick = None
        if not self._playing or self._position is None:
            return
        position = self._position + self._params.increment(self._speed)
        if position >= 100.0:
            self._position = 100.0
            self._playing = False
            logger.debug("Playback reached the end of the trip")
        else:
            self._position = position
            self._schedule_tick()
        self._notify()

    def set_speed(self, multiplier: int) -> None:
        """Set the playback multiplier; takes effect on the next tick.

        Raises:
            ValueError: If ``multiplier`` is not one of the supported speeds.
        """

        if multiplier not in self._params.speeds:
            raise ValueError(f"Unsupported speed {multiplier!r}; choose one of {self._params.speeds}")
        self._speed = multiplier
        self._notify()

    def set_params(self, params: PlaybackParams) -> None:
        """Swap playback parameters; the next tick uses the new increment.

        The speed falls back to the first supported one if ``params`` drops it.
        """

        self._params = params
        if self._speed not in params.speeds:
            self._speed = params.speeds[0]
        self._notify()

    def cycle_speed(self) -> int:
        speeds = self._params.speeds
        self._speed = speeds[(speeds.index(self._speed) + 1) % len(speeds)]
        self._notify()
        return self._speed

    # --- scheduling ----------------------------------------------------

    def _schedule_tick(self) -> None:
        if self._scheduler is None or self._pending_tick is not None:
            return
        self._pending_tick = self._scheduler.request_frame(self.tick)

    def _cancel_tick(self) -> None:
        if self._pending_tick is not None and self._scheduler is not None:
            self._scheduler.cancel_frame(self._pending_tick)
        self._pending_tick = None


class FrameCoalescer(Generic[T]):
    """Defer work to the next frame, keeping only the latest submitted value.

    At most one frame is requested at a time; later submits only replace the value,
    so a burst of inputs within one frame results in a single ``apply`` call with
    the last value. Without a scheduler, values are applied immediately.
    """

    def __init__(self, scheduler: FrameScheduler | None, apply: Callable[[T], None]) -> None:
        self._scheduler = scheduler
        self._apply = apply
        self._handle: int | None = None
        self._latest: T | None = None
        self._has_value = False

    @property
    def pending(self) -> bool:
        return self._has_value

    def submit(self, value: T) -> None:
        if self._scheduler is None:
            self._apply(value)
            return
        self._latest = value
        self._has_value = True
        if self._handle is None:
            self._handle = self._scheduler.request_frame(self._flush)

    def flush(self) -> None:
        """Apply the pending value now, if any."""

        self.cancel_frame()
        if self._has_value:
            self._flush()

    def cancel(self) -> None:
        self.cancel_frame()
        self._latest = None
        self._has_value = False

    def cancel_frame(self) -> None:
        if self._handle is not None and self._scheduler is not None:
            self._scheduler.cancel_frame(self._handle)
        self._handle = None

    def _flush(self) -> None:
        self._handle = None
        value = self._latest
        self._latest = None
        self._has_value = False
        self._apply(value)  # type: ignore[arg-type]
