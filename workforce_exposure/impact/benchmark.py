"""
Benchmark percentiles for workforce impact snapshots.

Each snapshot is ranked against every other snapshot in the same batch on
its overall score and on each component.
"""

import logging
from bisect import bisect_right
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from workforce_exposure.models import ImpactPercentiles, WorkforceImpactSnapshot

logger = logging.getLogger(__name__)


def to_percentile(values: Sequence[float], target: float) -> float:
    """
    Rank of ``target`` within ``values`` in [0, 1].

    The rank is the index of the last sorted value <= target over (n - 1).
    An empty list ranks 0, a single value ranks 1, and a target below every
    value ranks 0.
    """
    if not values:
        return 0.0
    if len(values) == 1:
        return 1.0
    ordered = sorted(values)
    rank_index = bisect_right(ordered, target) - 1
    if rank_index < 0:
        return 0.0
    return rank_index / (len(ordered) - 1)


def attach_percentiles(
    snapshots: Sequence[WorkforceImpactSnapshot],
    computed_at: Optional[str] = None,
) -> List[WorkforceImpactSnapshot]:
    """
    Return copies of the snapshots with percentiles and computed_at set.

    Args:
        snapshots: All snapshots of one benchmark run
        computed_at: ISO timestamp (now, UTC, when None)
    """
    computed_at = computed_at or datetime.now(timezone.utc).isoformat()
    scores = [snapshot.score for snapshot in snapshots]
    automation = [snapshot.automation_component for snapshot in snapshots]
    augmentation = [snapshot.augmentation_component for snapshot in snapshots]

    ranked = []
    for snapshot in snapshots:
        percentiles = ImpactPercentiles(
            overall=to_percentile(scores, snapshot.score),
            automation=to_percentile(automation, snapshot.automation_component),
            augmentation=to_percentile(augmentation, snapshot.augmentation_component),
        )
        ranked.append(snapshot.model_copy(update={"percentiles": percentiles, "computed_at": computed_at}))

    logger.info(f"Attached benchmark percentiles to {len(ranked)} snapshots")
    return ranked
