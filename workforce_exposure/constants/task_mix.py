"""
Task-mix buckets and the task classification rule.

Every task belongs to exactly one bucket: automation, augmentation or
manual. The rule is shared by report tasks and catalog tasks so that a
role classified from either source lands in the same buckets.
"""

import math
from typing import Optional

AUTOMATION = "automation"
AUGMENTATION = "augmentation"
MANUAL = "manual"

TASK_MIX_CATEGORIES = (AUTOMATION, AUGMENTATION, MANUAL)

TASK_MIX_LABELS = {
    AUTOMATION: "Automation tasks",
    AUGMENTATION: "Augmentation tasks",
    MANUAL: "Manual tasks",
}

# Bucket that wins when a task's automation and augmentation scores are equal
# and positive. Downstream scores depend on it; confirm before changing.
TIE_BREAK_CATEGORY = AUTOMATION

# Integer total used when shares are turned into counts for display.
USAGE_SEGMENT_TOTAL = 100


def _score(value: Optional[float]) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0.0
    return value


def classify_task(automation: Optional[float], augmentation: Optional[float]) -> str:
    """
    Classify one task by its automation and augmentation scores.

    Missing or non-finite scores count as zero. A task with no positive score is manual;
    otherwise the larger score wins and exact ties go to TIE_BREAK_CATEGORY.
    """
    auto = _score(automation)
    aug = _score(augmentation)

    if auto <= 0 and aug <= 0:
        return MANUAL
    if auto == aug:
        return TIE_BREAK_CATEGORY
    return AUTOMATION if auto > aug else AUGMENTATION
