import logging
from itertools import permutations
from math import nan

import pytest

from errors import InvalidAlgorithm
from geometry import Point, route_length
from tours import TOUR_ALGOS, Frame, get_algorithm
from tours.exact_bruteforce import ExactBruteForceTour
from tours.nearest_neighbor import NearestNeighborTour

from conftest import random_points


def _final(algo, points, **kw):
    frames = [f for f in algo.search(points[0], points[1:], **kw) if f is not None]
    assert frames[-1].final
    assert all(not f.final for f in frames[:-1])
    return list(frames[-1].route), frames


# ---- registry ----

def test_registry_has_both_algorithms():
    assert set(TOUR_ALGOS) == {"naive", "closest"}
    assert isinstance(get_algorithm("naive"), ExactBruteForceTour)
    assert isinstance(get_algorithm("closest"), NearestNeighborTour)


@pytest.mark.parametrize("name", ["dijkstra", "", "Naive", None, 3])
def test_unknown_algorithm(name):
    with pytest.raises(InvalidAlgorithm) as info:
        get_algorithm(name)
    assert info.value.known == ["closest", "naive"]


# ---- exhaustive ----

@pytest.mark.parametrize("n", range(0, 7))
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_naive_is_optimal(n, seed):
    points = random_points(n, seed)
    origin, dests = points[0], points[1:]
    route, _ = _final(ExactBruteForceTour(), points)

    assert sorted(route) == list(range(1, n + 1))
    best = route_length(origin, dests, route)
    for perm in permutations(range(1, n + 1)):
        assert best <= route_length(origin, dests, perm) + 1e-9


def test_naive_square_walks_the_perimeter(square):
    route, _ = _final(ExactBruteForceTour(), square)
    # [1, 2, 3] and [3, 2, 1] both measure 30; the first enumerated wins
    assert route == [1, 2, 3]
    assert route_length(square[0], square[1:], route) == 30.0


def test_naive_beats_greedy_trap(greedy_trap):
    route, _ = _final(ExactBruteForceTour(), greedy_trap)
    assert route == [2, 1, 3]
    assert route_length(greedy_trap[0], greedy_trap[1:], route) == 10.0


def test_naive_ties_keep_first_in_enumeration_order():
    # two identical destinations: every ordering has the same length
    points = [Point(0, 0), Point(5, 5), Point(5, 5), Point(5, 5)]
    route, _ = _final(ExactBruteForceTour(), points)
    assert route == [1, 2, 3]


def test_naive_animated_frames_improve_then_finish():
    points = random_points(6, seed=4)
    origin, dests = points[0], points[1:]
    sync_route, _ = _final(ExactBruteForceTour(), points)
    route, frames = _final(ExactBruteForceTour(), points, animate=True)

    assert route == sync_route
    assert [f.step for f in frames] == list(range(len(frames)))

    intermediate = frames[:-1]
    assert intermediate, "a new best is always found at least once"
    lengths = [route_length(origin, dests, f.route) for f in intermediate]
    assert all(b < a for a, b in zip(lengths, lengths[1:]))
    for f in intermediate:
        assert sorted(f.route) == list(range(1, 7))
    assert intermediate[-1].route == frames[-1].route


def test_naive_frame_every_emits_on_cadence():
    points = random_points(4, seed=2)
    _, frames = _final(ExactBruteForceTour(), points, animate=True, frame_every=1)
    # one frame per ordering (4! of them) plus the final one
    assert len(frames) == 24 + 1


def test_naive_sync_yields_only_final():
    frames = list(ExactBruteForceTour().search(Point(0, 0), random_points(5, 1)[1:]))
    assert len(frames) == 1
    assert frames[0].final


def test_naive_nan_coordinates_still_give_a_permutation():
    points = [Point(0, 0), Point(nan, 0), Point(1, 1)]
    route, _ = _final(ExactBruteForceTour(), points)
    assert sorted(route) == [1, 2]


def test_naive_warns_on_large_input(caplog):
    algo = ExactBruteForceTour(warn_threshold=2)
    with caplog.at_level(logging.WARNING, logger="tours.exact_bruteforce"):
        _final(algo, random_points(3, seed=0))
    assert "Exhaustive search over 3 destinations" in caplog.text


def test_naive_parallel_matches_sequential(square):
    algo = ExactBruteForceTour()
    for points in (square, random_points(6, seed=7), random_points(5, seed=8)):
        route, _ = _final(algo, points)
        assert algo.solve_parallel(points[0], points[1:], workers=2) == route


def test_naive_parallel_trivial_sizes():
    algo = ExactBruteForceTour()
    assert algo.solve_parallel(Point(0, 0), [], workers=4) == []
    assert algo.solve_parallel(Point(0, 0), [Point(1, 1)], workers=4) == [1]


# ---- greedy nearest neighbour ----

def test_closest_square_goes_to_nearest_first(square):
    route, _ = _final(NearestNeighborTour(), square)
    assert route[0] == 1
    assert route == [1, 2, 3]


def test_closest_is_a_heuristic(greedy_trap):
    route, _ = _final(NearestNeighborTour(), greedy_trap)
    assert route == [1, 2, 3]
    assert route_length(greedy_trap[0], greedy_trap[1:], route) == 12.0


@pytest.mark.parametrize(
    "points",
    [
        [Point(0, 0), Point(0, 5), Point(5, 0)],
        [Point(0, 0), Point(5, 0), Point(0, 5)],
        [Point(0, 0), Point(-3, 4), Point(3, 4), Point(4, 3)],
    ],
)
def test_closest_tie_goes_to_lowest_index(points):
    algo = NearestNeighborTour()
    routes = {tuple(_final(algo, points)[0]) for _ in range(5)}
    assert len(routes) == 1
    assert routes.pop()[0] == 1


@pytest.mark.parametrize("n", range(0, 9))
def test_closest_returns_permutation(n):
    route, _ = _final(NearestNeighborTour(), random_points(n, seed=n))
    assert sorted(route) == list(range(1, n + 1))


def test_closest_picks_nearest_at_every_step():
    points = random_points(8, seed=11)
    origin, dests = points[0], points[1:]
    route, _ = _final(NearestNeighborTour(), points)

    current = origin
    remaining = set(range(1, 9))
    for idx in route:
        chosen = route_length(current, dests, [idx])
        assert all(chosen <= route_length(current, dests, [j]) for j in remaining)
        remaining.remove(idx)
        current = dests[idx - 1]


def test_closest_animated_one_frame_per_selection():
    points = random_points(5, seed=3)
    sync_route, _ = _final(NearestNeighborTour(), points)
    route, frames = _final(NearestNeighborTour(), points, animate=True)

    assert route == sync_route
    assert len(frames) == 5
    for i, f in enumerate(frames):
        assert f.step == i
        assert len(f.route) == i + 1
        assert tuple(route[: i + 1]) == f.route


def test_closest_nan_coordinates_still_give_a_permutation():
    points = [Point(0, 0), Point(nan, 0), Point(1, 1), Point(nan, nan)]
    route, _ = _final(NearestNeighborTour(), points)
    assert sorted(route) == [1, 2, 3]
    assert route[0] == 2


@pytest.mark.parametrize("algo", [ExactBruteForceTour(), NearestNeighborTour()])
def test_no_destinations(algo):
    for animate in (False, True):
        frames = list(algo.search(Point(3, 3), [], animate=animate))
        assert frames == [Frame((), final=True, step=0)]


@pytest.mark.parametrize("algo", [ExactBruteForceTour(), NearestNeighborTour()])
def test_single_destination(algo):
    route, _ = _final(algo, [Point(0, 0), Point(9, 9)])
    assert route == [1]


def test_naive_animated_checkpoints_between_frames():
    algo = ExactBruteForceTour(checkpoint_every=50)
    points = random_points(6, seed=4)
    items = list(algo.search(points[0], points[1:], animate=True))

    frames = [f for f in items if f is not None]
    assert None in items
    assert frames[-1].final
    assert items[-1] is frames[-1]
    # every 50th ordering yields something: a new best or a checkpoint
    assert items.count(None) + len(frames) >= 720 // 50


def test_naive_sync_has_no_checkpoints():
    algo = ExactBruteForceTour(checkpoint_every=1)
    points = random_points(5, seed=1)
    assert list(algo.search(points[0], points[1:])) == [
        Frame(tuple(_final(algo, points)[0]), final=True, step=0)
    ]


def test_naive_warn_threshold_per_call(caplog):
    algo = ExactBruteForceTour()
    points = random_points(3, seed=0)
    with caplog.at_level(logging.WARNING, logger="tours.exact_bruteforce"):
        _final(algo, points)
        assert caplog.text == ""
        _final(algo, points, warn_threshold=2)
    assert "Exhaustive search over 3 destinations" in caplog.text
