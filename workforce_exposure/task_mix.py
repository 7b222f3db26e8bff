"""
Role/Task-Mix Resolver.

Turns a report role into a task mix: how many of its tasks (coverage view)
or how much of its work (usage view) falls into each bucket. Sources are
tried in a fixed order so a role always resolves the same way:

    counts: stored counts -> classified top tasks -> catalog entry
            -> counts synthesised from shares -> zeros
    shares: stored shares -> catalog usage counts -> role shares -> empty

Usage:
    from workforce_exposure.task_mix import derive_task_mix_counts

    counts = derive_task_mix_counts(role, catalog)
    if counts.total:
        automation_share = counts.automation / counts.total
"""

import logging
import math
from enum import Enum
from typing import Optional, Union

from workforce_exposure.catalog import OccupationCatalog, get_default_catalog
from workforce_exposure.constants.task_mix import (
    AUGMENTATION,
    AUTOMATION,
    MANUAL,
    TASK_MIX_CATEGORIES,
    USAGE_SEGMENT_TOTAL,
    classify_task,
)
from workforce_exposure.models import OrgRole, TaskMixCounts, TaskMixShares

logger = logging.getLogger(__name__)


class TaskMixView(str, Enum):
    """How a task mix is presented."""
    COVERAGE = "coverage"  # task counts per bucket
    USAGE = "usage"        # usage shares scaled to integer segments


def _resolve_catalog(catalog: Optional[OccupationCatalog]) -> OccupationCatalog:
    return catalog if catalog is not None else get_default_catalog()


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# Counts
# =============================================================================

def classify_top_tasks(role: OrgRole) -> TaskMixCounts:
    """Count a role's top tasks per bucket."""
    counts = {AUTOMATION: 0, AUGMENTATION: 0, MANUAL: 0}
    for task in role.top_tasks:
        counts[classify_task(task.automation, task.augmentation)] += 1
    return TaskMixCounts(**counts)


def derive_task_mix_counts(
    role: Optional[OrgRole],
    catalog: Optional[OccupationCatalog] = None,
    segment_total: int = USAGE_SEGMENT_TOTAL,
) -> TaskMixCounts:
    """
    Derive the {automation, augmentation, manual} task counts for a role.

    Args:
        role: Report role (None yields zero counts)
        catalog: Occupational catalog (default catalog when None)
        segment_total: Total used when counts are synthesised from shares

    Returns:
        Non-negative counts; all zero when the role carries no signal
    """
    if role is None:
        return TaskMixCounts()

    if role.task_mix_counts is not None:
        return role.task_mix_counts

    if role.top_tasks:
        counts = classify_top_tasks(role)
        if counts.total == 0:
            logger.debug(f"Role {role.code} has top tasks but zero classified counts")
        return counts

    catalog_role = _resolve_catalog(catalog).find_for_role(role)
    if catalog_role is not None:
        metrics = catalog_role.metrics
        automation = max(0, metrics.automation_tasks)
        augmentation = max(0, metrics.augmentation_tasks)
        manual = max(0, metrics.manual_tasks)

        if automation == 0 and augmentation == 0 and manual == 0 and metrics.task_count > 0:
            # Only the number of tasks is known: split it three ways.
            equal_share = max(1, _round_half_up(metrics.task_count / 3))
            automation = equal_share
            augmentation = equal_share
            manual = max(0, metrics.task_count - equal_share * 2)

        logger.debug(
            f"Using catalog task mix for role {role.code} ({catalog_role.code}): "
            f"{automation}/{augmentation}/{manual}"
        )
        return TaskMixCounts(automation=automation, augmentation=augmentation, manual=manual)

    shares = _stored_or_own_shares(role)
    if shares is not None:
        logger.debug(f"Synthesising task counts from shares for role {role.code}")
        return largest_remainder_counts(shares, segment_total)

    logger.debug(f"Role {role.code} has no task-mix signal")
    return TaskMixCounts()


# =============================================================================
# Shares
# =============================================================================

def _own_shares(role: OrgRole) -> Optional[TaskMixShares]:
    automation = role.automation_share if _is_number(role.automation_share) else None
    augmentation = role.augmentation_share if _is_number(role.augmentation_share) else None
    if automation is None and augmentation is None:
        return None
    manual = max(0.0, 1.0 - (automation or 0.0) - (augmentation or 0.0))
    return TaskMixShares(automation=automation, augmentation=augmentation, manual=manual)


def _stored_or_own_shares(role: OrgRole) -> Optional[TaskMixShares]:
    if role.task_mix_shares is not None and not role.task_mix_shares.is_empty:
        return role.task_mix_shares
    return _own_shares(role)


def derive_task_mix_shares(
    role: Optional[OrgRole],
    catalog: Optional[OccupationCatalog] = None,
) -> TaskMixShares:
    """
    Derive the share of a role's work in each bucket.

    Returns:
        Shares in [0, 1]; every field None when nothing is known
    """
    if role is None:
        return TaskMixShares()

    if role.task_mix_shares is not None and not role.task_mix_shares.is_empty:
        return role.task_mix_shares

    catalog_role = _resolve_catalog(catalog).find_for_role(role)
    if catalog_role is not None and catalog_role.metrics.total_count > 0:
        metrics = catalog_role.metrics
        automation = metrics.automation_count / metrics.total_count
        augmentation = metrics.augmentation_count / metrics.total_count
        return TaskMixShares(
            automation=automation,
            augmentation=augmentation,
            manual=max(0.0, 1.0 - automation - augmentation),
        )

    own = _own_shares(role)
    if own is not None:
        return own

    return TaskMixShares()


# =============================================================================
# Largest-remainder rounding
# =============================================================================

def _clamp_share(value: Optional[float]) -> float:
    if not _is_number(value) or value != value:
        return 0.0
    return min(1.0, max(0.0, float(value)))


def largest_remainder_counts(shares: TaskMixShares, total: int = USAGE_SEGMENT_TOTAL) -> TaskMixCounts:
    """
    Round shares into integer counts that sum exactly to ``total``.

    Each bucket gets the floor of its scaled share, then the units left over
    go one at a time to the buckets with the largest fractional parts (bucket
    order breaks ties). A missing manual share is the remainder of the other
    two. Shares that do not sum to 1 are rescaled proportionally; all-zero
    shares put everything in manual.
    """
    if total <= 0:
        return TaskMixCounts()

    automation = _clamp_share(shares.automation)
    augmentation = _clamp_share(shares.augmentation)
    if shares.manual is None:
        manual = max(0.0, 1.0 - automation - augmentation)
    else:
        manual = _clamp_share(shares.manual)

    values = {AUTOMATION: automation, AUGMENTATION: augmentation, MANUAL: manual}
    share_sum = sum(values.values())
    if share_sum <= 0:
        return TaskMixCounts(manual=total)

    scaled = {key: value / share_sum * total for key, value in values.items()}
    rounded = {key: int(math.floor(value)) for key, value in scaled.items()}

    remainder = total - sum(rounded.values())
    order = sorted(
        TASK_MIX_CATEGORIES,
        key=lambda key: (-(scaled[key] - rounded[key]), TASK_MIX_CATEGORIES.index(key)),
    )
    index = 0
    while remainder > 0:
        rounded[order[index % len(order)]] += 1
        remainder -= 1
        index += 1

    return TaskMixCounts(**rounded)


def derive_task_mix_for_view(
    role: Optional[OrgRole],
    view: Union[TaskMixView, str],
    catalog: Optional[OccupationCatalog] = None,
    segment_total: int = USAGE_SEGMENT_TOTAL,
) -> TaskMixCounts:
    """Task-mix counts for the coverage view, or usage shares as integer segments."""
    view = TaskMixView(view)
    if view == TaskMixView.COVERAGE:
        return derive_task_mix_counts(role, catalog, segment_total)

    shares = derive_task_mix_shares(role, catalog)
    if shares.is_empty:
        return TaskMixCounts()
    return largest_remainder_counts(shares, segment_total)
