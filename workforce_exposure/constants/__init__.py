"""Shared constants: task-mix buckets, country codes and grouping aliases."""

from workforce_exposure.constants.aggregation_groups import (
    COUNTRY_GROUP_ALIASES,
    INDUSTRY_GROUP_ALIASES,
    canonical_country,
    canonical_industry,
)
from workforce_exposure.constants.countries import COUNTRY_NAME_TO_ISO2, resolve_iso_code
from workforce_exposure.constants.task_mix import (
    AUGMENTATION,
    AUTOMATION,
    MANUAL,
    TASK_MIX_CATEGORIES,
    TASK_MIX_LABELS,
    TIE_BREAK_CATEGORY,
    USAGE_SEGMENT_TOTAL,
    classify_task,
)

__all__ = [
    "AUGMENTATION",
    "AUTOMATION",
    "COUNTRY_GROUP_ALIASES",
    "COUNTRY_NAME_TO_ISO2",
    "INDUSTRY_GROUP_ALIASES",
    "MANUAL",
    "TASK_MIX_CATEGORIES",
    "TASK_MIX_LABELS",
    "TIE_BREAK_CATEGORY",
    "USAGE_SEGMENT_TOTAL",
    "canonical_country",
    "canonical_industry",
    "classify_task",
    "resolve_iso_code",
]
