import asyncio
import logging
from time import perf_counter

from config import Config
from scene import Scene
from geometry import route_length
from io_utils import make_run_dir, save_config, save_summary
from logging_config import setup_logging
from engine import RouteResult, run, solve_animated_async
from tours import Frame

logger = logging.getLogger(__name__)


def _run_with_delay(cfg: Config, scene: Scene) -> RouteResult:
    """
    Animated run paced on an event loop: frame_delay seconds between
    frames, the way a UI would step one frame per redraw.
    """
    frames = 0

    def on_frame(frame: Frame) -> None:
        nonlocal frames
        frames += 1
        _log_frame(scene, frame)

    t0 = perf_counter()
    route = asyncio.run(
        solve_animated_async(
            cfg.algorithm,
            scene.points,
            on_frame=on_frame,
            frame_delay=cfg.frame_delay,
            frame_every=cfg.frame_every,
            warn_threshold=cfg.naive_warn_threshold,
        )
    )
    dt = perf_counter() - t0
    if route is None:
        raise RuntimeError("animation ended without a final route")

    return RouteResult(
        algorithm=cfg.algorithm,
        n_destinations=len(scene.destinations),
        route=route,
        length=route_length(scene.origin, scene.destinations, route),
        runtime=dt,
        frames=frames,
        animated=True,
    )


def _log_frame(scene: Scene, frame: Frame) -> None:
    length = route_length(scene.origin, scene.destinations, frame.route)
    tag = "final" if frame.final else f"frame {frame.step}"
    logger.info("[%s] %s length=%.2f", tag, list(frame.route), length)


def main() -> None:
    """
    Single-run entry point for the route engine.

    Typical usage:
      1. Open config.py and edit the Config defaults
         (canvas size, number of destinations, algorithm, animated, ...).
      2. Run:
             python main.py
      3. Inspect the output folder under outputs/ (config.json, summary.json).
    """

    # ------------------------------------------------------------------
    # 1) Configuration + logging
    # ------------------------------------------------------------------
    cfg = Config()
    setup_logging(
        level=logging.INFO if cfg.log_events else logging.WARNING,
        log_file=cfg.log_file,
    )

    # ------------------------------------------------------------------
    # 2) Output directory
    # ------------------------------------------------------------------
    run_dir = make_run_dir(cfg, base="outputs")
    save_config(cfg, run_dir)

    # ------------------------------------------------------------------
    # 3) Build the scene (seeded) and solve
    # ------------------------------------------------------------------
    scene = Scene.from_config(cfg)
    logger.info(
        "Scene %dx%d, origin=(%g, %g), %d destinations, algorithm=%s",
        scene.width, scene.height, scene.origin.x, scene.origin.y,
        len(scene.destinations), cfg.algorithm,
    )

    if cfg.animated and cfg.frame_delay > 0:
        result = _run_with_delay(cfg, scene)
    elif cfg.animated:
        result = run(
            cfg.algorithm,
            scene.points,
            animated=True,
            frame_every=cfg.frame_every,
            on_frame=lambda f: _log_frame(scene, f),
            warn_threshold=cfg.naive_warn_threshold,
        )
    else:
        result = run(
            cfg.algorithm,
            scene.points,
            workers=cfg.workers,
            warn_threshold=cfg.naive_warn_threshold,
        )

    # ------------------------------------------------------------------
    # 4) Summary
    # ------------------------------------------------------------------
    summary: dict = {
        "scene": scene.to_dict(),
        "routing": result.to_dict(),
    }
    save_summary(summary, run_dir)

    print(f"Run directory: {run_dir}")
    print(f"Route: {result.route}")
    print(f"Length: {result.length:.2f} ({result.frames} frame(s), {result.runtime:.4f}s)")


if __name__ == "__main__":
    main()
