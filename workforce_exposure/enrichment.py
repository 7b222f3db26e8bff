"""
Report normalisation and catalog enrichment.

Raw reports have gone through several producer versions. Before they are
aggregated they are brought to the current shape:

1. ``normalize_legacy_report`` renames old keys on the raw JSON
   (``automationRisk`` -> ``automationShare``, ...) and folds per-bucket
   task counts into ``taskMixCounts``.
2. ``enrich_report`` cleans dominant-role references down to occupation
   codes, rescales percentage shares into [0, 1] and fills in roles the
   hierarchy references but the report does not describe, using the
   occupational catalog.
"""

import logging
import math
import re
from typing import Any, Dict, List, Optional

from workforce_exposure.catalog import CatalogRole, OccupationCatalog, get_default_catalog
from workforce_exposure.graph.org_graph import build_role_lookup
from workforce_exposure.models import DominantRole, OrgNode, OrgReport, OrgRole, TaskMixCounts, TaskMixShares

logger = logging.getLogger(__name__)

OCCUPATION_CODE_PATTERN = re.compile(r"\d{2}-\d{4}(?:\.\d{2})?")
MAX_REFERENCE_LENGTH = 32

LEGACY_KEY_RENAMES = {
    "automationRisk": "automationShare",
    "anthropicAutomationRisk": "automationShare",
    "augmentationScore": "augmentationShare",
    "anthropicAugmentationScore": "augmentationShare",
    "noSignalTaskCount": "manualTaskCount",
    "no_signal_task_count": "manualTaskCount",
}

LEGACY_TASK_COUNT_KEYS = {
    "automationTaskCount": "automation",
    "augmentationTaskCount": "augmentation",
    "manualTaskCount": "manual",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def to_share(value: Any) -> Optional[float]:
    """
    Coerce a share that may be a percentage into [0, 1].

    Values up to 1 are shares, values up to 100 are percentages, larger
    values saturate at 1. Non-numeric input yields None.
    """
    if not _is_number(value):
        return None
    if value <= 0:
        return 0.0
    if value <= 1:
        return float(value)
    if value <= 100:
        return min(1.0, value / 100)
    return 1.0


# =============================================================================
# Legacy key normalisation
# =============================================================================

def normalize_legacy_report(value: Any) -> Any:
    """Recursively rewrite legacy keys in raw report JSON. Returns a new structure."""
    if isinstance(value, list):
        return [normalize_legacy_report(item) for item in value]
    if not isinstance(value, dict):
        return value

    result: Dict[str, Any] = {}
    for key, field_value in value.items():
        result[LEGACY_KEY_RENAMES.get(key, key)] = normalize_legacy_report(field_value)

    if "taskMixCounts" not in result and any(_is_number(result.get(key)) for key in LEGACY_TASK_COUNT_KEYS):
        result["taskMixCounts"] = {
            bucket: max(0, int(result[key])) if _is_number(result.get(key)) else 0
            for key, bucket in LEGACY_TASK_COUNT_KEYS.items()
        }

    automation = result.get("automationShare")
    augmentation = result.get("augmentationShare")
    if "taskMixShares" not in result and (_is_number(automation) or _is_number(augmentation)):
        automation = automation if _is_number(automation) else None
        augmentation = augmentation if _is_number(augmentation) else None
        result["taskMixShares"] = {
            "automation": automation,
            "augmentation": augmentation,
            "manual": max(0.0, 1.0 - (automation or 0.0) - (augmentation or 0.0)),
        }

    for key in list(LEGACY_TASK_COUNT_KEYS) + ["totalTaskCount"]:
        result.pop(key, None)
    return result


# =============================================================================
# Catalog enrichment
# =============================================================================

def clean_role_reference(reference: str) -> Optional[str]:
    """Occupation code found in a reference, else the reference without whitespace."""
    match = OCCUPATION_CODE_PATTERN.search(reference or "")
    cleaned = match.group(0) if match else re.sub(r"\s+", "", reference or "")
    if not cleaned or len(cleaned) > MAX_REFERENCE_LENGTH:
        return None
    return cleaned


def clean_dominant_roles(node: OrgNode) -> List[DominantRole]:
    """Cleaned, de-duplicated dominant-role entries for a node."""
    seen = set()
    cleaned_roles = []
    for entry in node.dominant_roles:
        cleaned = clean_role_reference(entry.role_id)
        if cleaned is None:
            logger.debug(f"Node {node.id}: dropping unusable role reference '{entry.role_id}'")
            continue
        key = cleaned.lower()
        if key in seen:
            continue
        seen.add(key)
        cleaned_roles.append(DominantRole(role_id=cleaned, headcount=entry.headcount))
    return cleaned_roles


def _share_from_counts(count: float, total: float) -> Optional[float]:
    if total <= 0:
        return None
    return to_share(count / total)


def build_role_from_catalog(code: str, catalog_role: Optional[CatalogRole]) -> OrgRole:
    """
    Report role for an occupation code the report does not describe.

    Without a catalog entry the role only carries its code, so it resolves
    but contributes no task mix.
    """
    if catalog_role is None:
        return OrgRole(code=code, title=code, normalized_title=code.lower())

    metrics = catalog_role.metrics
    automation = _share_from_counts(metrics.automation_count, metrics.total_count)
    augmentation = _share_from_counts(metrics.augmentation_count, metrics.total_count)

    task_mix_counts = None
    if metrics.automation_tasks + metrics.augmentation_tasks + metrics.manual_tasks > 0:
        task_mix_counts = TaskMixCounts(
            automation=metrics.automation_tasks,
            augmentation=metrics.augmentation_tasks,
            manual=metrics.manual_tasks,
        )

    task_mix_shares = None
    if automation is not None or augmentation is not None:
        task_mix_shares = TaskMixShares(
            automation=automation,
            augmentation=augmentation,
            manual=max(0.0, min(1.0, 1.0 - (automation or 0.0) - (augmentation or 0.0))),
        )

    return OrgRole(
        code=code,
        title=catalog_role.title,
        normalized_title=catalog_role.normalized_title,
        parent_cluster=catalog_role.parent_cluster,
        automation_share=automation,
        augmentation_share=augmentation,
        task_mix_counts=task_mix_counts,
        task_mix_shares=task_mix_shares,
    )


def enrich_report(report: OrgReport, catalog: Optional[OccupationCatalog] = None) -> OrgReport:
    """
    Return a copy of the report ready for aggregation.

    Args:
        report: Report as produced upstream
        catalog: Occupational catalog (default catalog when None)

    Returns:
        OrgReport with cleaned references, [0, 1] shares and a role for
        every referenced occupation
    """
    catalog = catalog if catalog is not None else get_default_catalog()

    nodes = []
    referenced: Dict[str, str] = {}
    for node in report.hierarchy:
        dominant_roles = clean_dominant_roles(node)
        for entry in dominant_roles:
            referenced.setdefault(entry.key, entry.role_id)
        nodes.append(node.model_copy(update={
            "dominant_roles": dominant_roles,
            "automation_share": to_share(node.automation_share),
            "augmentation_share": to_share(node.augmentation_share),
        }))

    lookup = build_role_lookup(report.roles)
    roles = list(report.roles)
    added = 0
    for key, code in referenced.items():
        if key in lookup:
            continue
        catalog_role = catalog.get_by_code(code)
        if catalog_role is None:
            logger.debug(f"Occupation {code} not in catalog, adding placeholder role")
        roles.append(build_role_from_catalog(code, catalog_role))
        added += 1

    roles.sort(key=lambda role: (role.title or "").casefold())
    if added:
        logger.info(f"Enriched report with {added} role(s) from the catalog")

    return report.model_copy(update={"hierarchy": nodes, "roles": roles})
