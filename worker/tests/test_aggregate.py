import pytest

from gridscan.core.aggregate import compute_stats, estimate_cost, round_half_up
from gridscan.core.models import GridPoint, ScanPointResult


def results_with_ranks(ranks):
    return [
        ScanPointResult(point=GridPoint(lat=0.0, lng=0.0, row=0, col=index), rank=rank)
        for index, rank in enumerate(ranks)
    ]


def test_stats_without_rankings():
    stats = compute_stats(results_with_ranks([None] * 9), total_points=9)

    assert stats.average_rank is None
    assert stats.visibility_percent == 0
    assert stats.top3_count == 0
    assert stats.top10_count == 0
    assert stats.ranked_points == 0
    assert stats.total_points == 9


def test_stats_mixed_rankings():
    ranks = [1, 2, 3, 4, 11, None, None, None, 12]
    stats = compute_stats(results_with_ranks(ranks), total_points=9)

    assert stats.ranked_points == 6
    assert stats.average_rank == pytest.approx(5.5)
    assert stats.visibility_percent == 67
    assert stats.top3_count == 3
    assert stats.top10_count == 4
    assert stats.top3_count <= stats.top10_count <= stats.total_points


def test_average_rank_rounds_to_one_decimal():
    stats = compute_stats(results_with_ranks([1, 2, 2]), total_points=3)
    assert stats.average_rank == pytest.approx(1.7)


def test_visibility_percent_rounds_half_up():
    stats = compute_stats(results_with_ranks([1] + [None] * 7), total_points=8)
    assert stats.visibility_percent == 13


def test_full_visibility():
    stats = compute_stats(results_with_ranks([1] * 25), total_points=25)
    assert stats.visibility_percent == 100
    assert stats.average_rank == 1.0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.25, 1) == 0.3


def test_estimate_cost():
    assert estimate_cost(25, 0.002) == pytest.approx(0.05)
    assert estimate_cost(0, 0.002) == 0
