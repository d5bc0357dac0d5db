# engine.py
"""
Route engine entry points.

    solve(algorithm, points)                -> final route
    solve_animated(algorithm, points)       -> AnimationRun (lazy, cancellable frames)
    solve_animated_async(algorithm, points) -> coroutine, one on_frame call per frame

`points` is [origin, d1, ..., dn]; each point may be a Point, an (x, y)
pair or a {"x": .., "y": ..} mapping. Routes are 1-based indices into
`points` with the origin left out, e.g. [2, 1, 3].

All validation happens before any search work starts. Nothing is kept
between calls, so independent calls can run concurrently.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, asdict
from time import perf_counter
from typing import Any, Callable, Dict, Iterator, List, Optional, Protocol, Sequence, Tuple

from errors import EmptyInput
from geometry import Point, Route, as_points, route_length
from tours import Frame, TourAlgorithm, get_algorithm

logger = logging.getLogger(__name__)


class CancelToken(Protocol):
    """Anything with is_set(), e.g. threading.Event or asyncio.Event."""

    def is_set(self) -> bool:
        ...


def _prepare(algorithm: Any, points: Sequence[Any]) -> Tuple[TourAlgorithm, Point, List[Point]]:
    algo = get_algorithm(algorithm)
    if points is None:
        raise EmptyInput()
    pts = as_points(list(points))
    if not pts:
        raise EmptyInput()
    return algo, pts[0], pts[1:]


# ---------------------------------------------------------------------
# synchronous
# ---------------------------------------------------------------------

def solve(
    algorithm: str,
    points: Sequence[Any],
    workers: Optional[int] = None,
    warn_threshold: Optional[int] = None,
) -> Route:
    """
    Compute the final route for `points` with the named algorithm
    ("naive" or "closest").

    workers > 1 spreads the exhaustive search over a process pool; the
    result is identical to the sequential one. Ignored by "closest".

    warn_threshold: destination count above which the exhaustive search
    logs a slowness warning (solver default when None).
    """
    algo, origin, destinations = _prepare(algorithm, points)
    logger.debug("solve(%s) over %d destinations", algo.name, len(destinations))

    if workers is not None and workers > 1 and hasattr(algo, "solve_parallel"):
        return algo.solve_parallel(origin, destinations, workers, warn_threshold=warn_threshold)

    final: Optional[Frame] = None
    for frame in algo.search(origin, destinations, warn_threshold=warn_threshold):
        if frame is not None:
            final = frame
    if final is None or not final.final:
        raise RuntimeError(f"{algo.name} search ended without a final frame")
    return list(final.route)


# ---------------------------------------------------------------------
# animated
# ---------------------------------------------------------------------

class AnimationRun:
    """
    Iterator over the frames of one animated search.

    Work only happens while frames are being pulled. cancel() (or leaving
    a `with` block, or setting the external token) closes the underlying
    generator, so nothing keeps running and no further frames come out.
    Call cancel() from the consuming thread; other threads should set the
    token instead.

    Long searches also yield None between frames; iteration skips those
    but still checks the token, and poll() exposes them so an event loop
    can get control back.
    """

    def __init__(self, frames: Iterator[Optional[Frame]], cancel: Optional[CancelToken] = None) -> None:
        self._frames = frames
        self._token = cancel
        self._closed = False
        self._cancelled = False
        self._result: Optional[Route] = None

    def __iter__(self) -> "AnimationRun":
        return self

    def __next__(self) -> Frame:
        while True:
            frame = self.poll()
            if frame is not None:
                return frame

    def poll(self) -> Optional[Frame]:
        """
        Advance the search by one item: the next frame, or None for a
        checkpoint with nothing to draw. StopIteration once the run is
        finished or cancelled.
        """
        if self._closed:
            raise StopIteration
        if self._token is not None and self._token.is_set():
            self.cancel()
            raise StopIteration

        try:
            frame = next(self._frames)
        except StopIteration:
            self._closed = True
            raise

        if frame is not None and frame.final:
            self._result = list(frame.route)
            self._frames.close()
            self._closed = True
        return frame

    def __enter__(self) -> "AnimationRun":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()

    def cancel(self) -> None:
        """Stop the search. Does nothing once the final frame was delivered."""
        if self._closed:
            return
        self._frames.close()
        self._closed = True
        self._cancelled = True
        logger.debug("animation cancelled")

    def finish(self) -> Optional[Route]:
        """Drain the remaining frames and return the final route (None if cancelled)."""
        for _ in self:
            pass
        return self._result

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._result is not None

    @property
    def result(self) -> Optional[Route]:
        return self._result


def solve_animated(
    algorithm: str,
    points: Sequence[Any],
    frame_every: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
    warn_threshold: Optional[int] = None,
) -> AnimationRun:
    """
    Same inputs and validation as solve(). Returns a non-restartable
    stream of frames: zero or more intermediate ones, then exactly one
    final frame equal to what solve() returns.

    frame_every: exhaustive search only, also emit the best-so-far route
    every k enumerated orderings.
    """
    algo, origin, destinations = _prepare(algorithm, points)
    logger.debug("solve_animated(%s) over %d destinations", algo.name, len(destinations))
    frames = algo.search(
        origin, destinations, animate=True,
        frame_every=frame_every, warn_threshold=warn_threshold,
    )
    return AnimationRun(frames, cancel=cancel)


async def solve_animated_async(
    algorithm: str,
    points: Sequence[Any],
    on_frame: Optional[Callable[[Frame], Any]] = None,
    frame_delay: float = 0.0,
    frame_every: Optional[int] = None,
    cancel: Optional[CancelToken] = None,
    warn_threshold: Optional[int] = None,
) -> Optional[Route]:
    """
    Run an animated search on the current event loop, handing each frame
    to on_frame (plain function or coroutine function) and yielding to
    the loop between frames.

    Checkpoints with nothing to draw still yield to the loop, so other
    tasks keep running during a long exhaustive search and task
    cancellation or the token take effect promptly.

    Returns the final route, or None if the token was set first; no
    on_frame call happens after that. Cancelling the task itself raises
    CancelledError as usual and closes the search.
    """
    anim = solve_animated(
        algorithm, points, frame_every=frame_every,
        cancel=cancel, warn_threshold=warn_threshold,
    )
    with anim:
        while True:
            try:
                frame = anim.poll()
            except StopIteration:
                break
            if frame is None:
                await asyncio.sleep(0)
                continue
            if on_frame is not None:
                res = on_frame(frame)
                if inspect.isawaitable(res):
                    await res
            if not frame.final:
                await asyncio.sleep(frame_delay)
    return anim.result


# ---------------------------------------------------------------------
# measured run (CLI / batch tooling)
# ---------------------------------------------------------------------

@dataclass
class RouteResult:
    algorithm: str
    n_destinations: int
    route: Route
    length: float
    runtime: float          # seconds, wall clock
    frames: int             # frames consumed (1 for synchronous runs)
    animated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def run(
    algorithm: str,
    points: Sequence[Any],
    animated: bool = False,
    frame_every: Optional[int] = None,
    workers: Optional[int] = None,
    on_frame: Optional[Callable[[Frame], Any]] = None,
    warn_threshold: Optional[int] = None,
) -> RouteResult:
    """Solve once and report route, length and timing."""
    _, origin, destinations = _prepare(algorithm, points)
    pts = [origin, *destinations]
    t0 = perf_counter()

    if animated:
        frames = 0
        anim = solve_animated(
            algorithm, pts, frame_every=frame_every, warn_threshold=warn_threshold,
        )
        for frame in anim:
            frames += 1
            if on_frame is not None:
                on_frame(frame)
        route = anim.result
        if route is None:
            raise RuntimeError(f"{algorithm} animation ended without a final frame")
    else:
        route = solve(algorithm, pts, workers=workers, warn_threshold=warn_threshold)
        frames = 1

    dt = perf_counter() - t0
    length = route_length(pts[0], pts[1:], route)
    logger.info(
        "%s: %d destinations, length %.2f, %.4fs, %d frame(s)",
        algorithm, len(pts) - 1, length, dt, frames,
    )
    return RouteResult(
        algorithm=algorithm,
        n_destinations=len(pts) - 1,
        route=route,
        length=length,
        runtime=dt,
        frames=frames,
        animated=animated,
    )
