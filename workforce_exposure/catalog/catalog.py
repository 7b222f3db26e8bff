"""
Occupational catalog.

The catalog maps occupations (O*NET-SOC codes and their titles) to the tasks
that make them up, and each task to its observed automation/augmentation
usage. It is reference data: built once, never mutated, and handed to every
aggregation call that needs it.

Two source formats are supported:

1. Flat records::

       {"roles": [{"code": "15-1252.00", "title": "Software Developers",
                   "tasks": [{"name": "...", "weight": 0.4, "count": 120,
                              "automationShare": 0.3, "augmentationShare": 0.5}]}]}

2. The usage hierarchy (sectors -> roles -> tasks, each metric stored under
   ``variable.<metric>.global.GLOBAL``) plus a map from normalised role
   title to ``{"code", "title"}``.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import Field, ValidationError

from workforce_exposure.config.settings import get_settings
from workforce_exposure.constants.task_mix import AUGMENTATION, AUTOMATION, classify_task
from workforce_exposure.exceptions import CatalogError
from workforce_exposure.models.base import FrozenCamelModel

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "occupation_catalog.json"


def normalize_key(value: Optional[str]) -> str:
    """Trimmed, lowercased lookup key ('' for None)."""
    return (value or "").strip().lower()


def catalog_share(value: Any) -> float:
    """
    Coerce a stored usage value into a share in [0, 1].

    Values up to 1 are already shares; values up to 1000 are read as
    percentages. Anything non-numeric or non-positive is 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if value != value or value <= 0:
        return 0.0
    if value <= 1:
        return float(value)
    if value <= 1000:
        scaled = value / 100
        if scaled <= 1:
            return float(scaled)
    return 1.0


# =============================================================================
# Catalog entities
# =============================================================================

@dataclass(frozen=True)
class CatalogTask:
    """One task of a catalog role with its usage classification."""
    name: str
    normalized_weight: float = 0.0
    count: float = 0.0
    automation_share: float = 0.0
    augmentation_share: float = 0.0

    @property
    def manual_share(self) -> float:
        return max(0.0, 1.0 - self.automation_share - self.augmentation_share)

    @property
    def category(self) -> str:
        return classify_task(self.automation_share, self.augmentation_share)

    @property
    def key(self) -> str:
        return normalize_key(self.name)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CatalogRoleMetrics:
    """
    Task-level totals for one catalog role.

    ``*_count`` fields are usage-count weighted; ``*_tasks`` fields count
    tasks by their classification bucket.
    """
    automation_count: float = 0.0
    augmentation_count: float = 0.0
    manual_count: float = 0.0
    total_count: float = 0.0
    coverage: Optional[float] = None
    task_count: int = 0
    automation_tasks: int = 0
    augmentation_tasks: int = 0
    manual_tasks: int = 0
    tasks: Tuple[CatalogTask, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CatalogRole:
    """An occupation known to the catalog."""
    code: str
    title: str
    normalized_title: str
    parent_cluster: Optional[str] = None
    metrics: CatalogRoleMetrics = field(default_factory=CatalogRoleMetrics)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def summarize_tasks(tasks: Iterable[CatalogTask], declared_task_count: int = 0,
                    coverage: Optional[float] = None) -> CatalogRoleMetrics:
    """Build role metrics from its task list."""
    tasks = tuple(tasks)
    automation_count = 0.0
    augmentation_count = 0.0
    total_count = 0.0
    buckets = {AUTOMATION: 0, AUGMENTATION: 0}
    manual_tasks = 0

    for task in tasks:
        if task.count > 0:
            total_count += task.count
            automation_count += task.count * task.automation_share
            augmentation_count += task.count * task.augmentation_share

        category = task.category
        if category in buckets:
            buckets[category] += 1
        else:
            manual_tasks += 1

    return CatalogRoleMetrics(
        automation_count=automation_count,
        augmentation_count=augmentation_count,
        manual_count=max(total_count - automation_count - augmentation_count, 0.0),
        total_count=total_count,
        coverage=coverage,
        task_count=max(declared_task_count, len(tasks)),
        automation_tasks=buckets[AUTOMATION],
        augmentation_tasks=buckets[AUGMENTATION],
        manual_tasks=manual_tasks,
        tasks=tasks,
    )


# =============================================================================
# Catalog index
# =============================================================================

class OccupationCatalog:
    """
    Immutable index of catalog roles by code and by normalised title.

    When two roles claim the same key the first one wins.
    """

    def __init__(self, roles: Iterable[CatalogRole] = ()):
        self._roles: Tuple[CatalogRole, ...] = tuple(roles)
        by_code: Dict[str, CatalogRole] = {}
        by_title: Dict[str, CatalogRole] = {}
        for role in self._roles:
            code_key = normalize_key(role.code)
            title_key = normalize_key(role.normalized_title or role.title)
            if code_key:
                by_code.setdefault(code_key, role)
            if title_key:
                by_title.setdefault(title_key, role)
        self._by_code: Mapping[str, CatalogRole] = MappingProxyType(by_code)
        self._by_title: Mapping[str, CatalogRole] = MappingProxyType(by_title)

    def __len__(self) -> int:
        return len(self._roles)

    def __iter__(self) -> Iterator[CatalogRole]:
        return iter(self._roles)

    def __repr__(self) -> str:
        return f"OccupationCatalog(roles={len(self._roles)})"

    @property
    def roles(self) -> Tuple[CatalogRole, ...]:
        return self._roles

    def get_by_code(self, code: Optional[str]) -> Optional[CatalogRole]:
        return self._by_code.get(normalize_key(code))

    def get_by_title(self, title: Optional[str]) -> Optional[CatalogRole]:
        return self._by_title.get(normalize_key(title))

    def find(self, code: Optional[str] = None, title: Optional[str] = None) -> Optional[CatalogRole]:
        """Look a role up by code first, then by normalised title."""
        match = self.get_by_code(code) if code else None
        if match is None and title:
            match = self.get_by_title(title)
        return match

    def find_for_role(self, role: Any) -> Optional[CatalogRole]:
        """Catalog entry for a report role (anything with code/normalized_title/title)."""
        if role is None:
            return None
        title = getattr(role, "normalized_title", None) or getattr(role, "title", None)
        return self.find(getattr(role, "code", None), title)

    # ─────────────────────────────────────────────────────────────────────────
    # Builders
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def empty(cls) -> "OccupationCatalog":
        return cls(())

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "OccupationCatalog":
        """Build from flat role records; raises CatalogError on malformed input."""
        roles = []
        for index, record in enumerate(records):
            try:
                parsed = CatalogRoleRecord.model_validate(record)
            except ValidationError as e:
                raise CatalogError(f"Invalid catalog role at index {index}: {e}") from e
            roles.append(parsed.to_catalog_role())
        return cls(roles)

    @classmethod
    def from_onet_hierarchy(cls, data: Dict[str, Any],
                            role_codes: Dict[str, Any]) -> "OccupationCatalog":
        """
        Build from the usage hierarchy.

        Roles whose normalised title has no entry in ``role_codes`` are
        skipped, matching how the hierarchy is published.
        """
        sectors = data.get("onet_hierarchy") or []
        if not isinstance(sectors, list):
            raise CatalogError("'onet_hierarchy' must be a list of sectors")

        roles = []
        skipped = 0
        for sector in sectors:
            if not isinstance(sector, dict):
                raise CatalogError("Each sector in 'onet_hierarchy' must be an object")
            parent_cluster = sector.get("cluster_name")
            for role_node in sector.get("children") or []:
                normalized_title = normalize_key(role_node.get("cluster_name"))
                if not normalized_title:
                    continue
                code_entry = role_codes.get(normalized_title) or {}
                code = code_entry.get("code")
                if not code:
                    skipped += 1
                    continue
                roles.append(CatalogRole(
                    code=code,
                    title=code_entry.get("title") or role_node.get("cluster_name") or code,
                    normalized_title=normalized_title,
                    parent_cluster=parent_cluster,
                    metrics=_aggregate_hierarchy_role(role_node),
                ))

        if skipped:
            logger.debug(f"Skipped {skipped} hierarchy roles without a code mapping")
        return cls(roles)


# =============================================================================
# Flat record schema
# =============================================================================

class CatalogTaskRecord(FrozenCamelModel):
    name: str
    weight: float = 0.0
    count: float = 0.0
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None

    def to_catalog_task(self) -> CatalogTask:
        return CatalogTask(
            name=self.name,
            normalized_weight=max(self.weight, 0.0),
            count=max(self.count, 0.0),
            automation_share=catalog_share(self.automation_share),
            augmentation_share=catalog_share(self.augmentation_share),
        )


class CatalogRoleRecord(FrozenCamelModel):
    code: str
    title: str
    normalized_title: Optional[str] = None
    parent_cluster: Optional[str] = None
    task_count: int = 0
    tasks: List[CatalogTaskRecord] = Field(default_factory=list)

    def to_catalog_role(self) -> CatalogRole:
        tasks = [task.to_catalog_task() for task in self.tasks]
        weights = sum(task.normalized_weight for task in tasks if task.normalized_weight > 0)
        coverage = weights if tasks else None
        return CatalogRole(
            code=self.code.strip(),
            title=self.title.strip(),
            normalized_title=normalize_key(self.normalized_title or self.title),
            parent_cluster=self.parent_cluster,
            metrics=summarize_tasks(tasks, declared_task_count=self.task_count, coverage=coverage),
        )


# =============================================================================
# Usage hierarchy helpers
# =============================================================================

def _global_metric(node: Dict[str, Any], key: str) -> float:
    metric = (node.get("variable") or {}).get(key) or {}
    value = (metric.get("global") or {}).get("GLOBAL")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return float(value)


def _aggregate_hierarchy_role(role_node: Dict[str, Any]) -> CatalogRoleMetrics:
    workforce_share = _global_metric(role_node, "pct")
    task_nodes = role_node.get("children") or []

    if not task_nodes or workforce_share == 0:
        # No usage signal: every task is manual and nothing can be weighted.
        return CatalogRoleMetrics(
            coverage=0.0 if task_nodes else None,
            task_count=len(task_nodes),
            manual_tasks=len(task_nodes),
        )

    tasks = []
    coverage = 0.0
    for task_node in task_nodes:
        weight = _global_metric(task_node, "pct")
        if weight > 0:
            coverage += weight
        tasks.append(CatalogTask(
            name=task_node.get("cluster_name") or "",
            normalized_weight=weight / workforce_share if weight > 0 else 0.0,
            count=max(_global_metric(task_node, "count"), 0.0),
            automation_share=catalog_share(_global_metric(task_node, "automation_pct")),
            augmentation_share=catalog_share(_global_metric(task_node, "augmentation_pct")),
        ))

    return summarize_tasks(tasks, coverage=coverage / workforce_share if coverage > 0 else 0.0)


# =============================================================================
# Loading
# =============================================================================

def load_catalog(path: Union[str, Path]) -> OccupationCatalog:
    """
    Load a catalog JSON file.

    A file holding ``onet_hierarchy`` must also hold ``role_codes``;
    otherwise a ``roles`` list of flat records is expected.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CatalogError(f"Catalog file not found: {path}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog {path} must contain a JSON object")

    if "onet_hierarchy" in data:
        role_codes = data.get("role_codes")
        if not isinstance(role_codes, dict):
            raise CatalogError(f"Catalog {path} has 'onet_hierarchy' but no 'role_codes' map")
        catalog = OccupationCatalog.from_onet_hierarchy(data, role_codes)
    else:
        records = data.get("roles")
        if not isinstance(records, list):
            raise CatalogError(f"Catalog {path} must contain a 'roles' list")
        catalog = OccupationCatalog.from_records(records)

    logger.info(f"Loaded occupational catalog from {path}: {len(catalog)} roles")
    return catalog


@lru_cache()
def get_default_catalog() -> OccupationCatalog:
    """
    Get the process-wide default catalog.

    Built on first use from ``catalog_path`` (or the packaged catalog) and
    cached. To rebuild after changing settings, use:
        get_default_catalog.cache_clear()
    """
    configured = get_settings().catalog_path
    return load_catalog(configured or DEFAULT_CATALOG_PATH)
