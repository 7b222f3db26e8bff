"""
Benchmark Percentile Tests.

Run with:
    pytest tests/test_benchmark.py -v
"""

import pytest

from workforce_exposure.impact import attach_percentiles, to_percentile
from workforce_exposure.models import WorkforceImpactSnapshot


class TestToPercentile:
    """Tests for to_percentile."""

    def test_empty(self):
        assert to_percentile([], 5.0) == 0.0

    def test_single_value(self):
        assert to_percentile([3.0], 0.0) == 1.0

    def test_middle_value(self):
        """Rank index of the last value <= target over n - 1."""
        assert to_percentile([3.0, 1.0, 2.0], 2.0) == 0.5

    def test_ties_rank_highest(self):
        assert to_percentile([1.0, 2.0, 2.0, 4.0], 2.0) == pytest.approx(2 / 3)

    def test_below_all(self):
        assert to_percentile([1.0, 2.0, 3.0], 0.5) == 0.0

    def test_above_all(self):
        assert to_percentile([1.0, 2.0, 3.0], 10.0) == 1.0


class TestAttachPercentiles:
    """Tests for attach_percentiles."""

    def test_ranks_every_snapshot(self):
        """Each snapshot is ranked on score and on both components."""
        snapshots = [
            WorkforceImpactSnapshot(score=2.0, total_headcount=10, automation_component=0.1,
                                    augmentation_component=0.3),
            WorkforceImpactSnapshot(score=6.0, total_headcount=10, automation_component=0.5,
                                    augmentation_component=0.1),
        ]

        ranked = attach_percentiles(snapshots, computed_at="2024-01-01T00:00:00+00:00")

        assert [snapshot.percentiles.overall for snapshot in ranked] == [0.0, 1.0]
        assert [snapshot.percentiles.automation for snapshot in ranked] == [0.0, 1.0]
        assert [snapshot.percentiles.augmentation for snapshot in ranked] == [1.0, 0.0]
        assert all(snapshot.computed_at == "2024-01-01T00:00:00+00:00" for snapshot in ranked)

    def test_inputs_untouched(self):
        """The originals are not modified."""
        snapshot = WorkforceImpactSnapshot(score=2.0, total_headcount=10)

        ranked = attach_percentiles([snapshot])

        assert snapshot.percentiles is None
        assert ranked[0].percentiles.overall == 1.0
        assert ranked[0].computed_at is not None
