"""
Report models for Workforce Exposure.

These models describe one company's organisational report as produced by
the upstream research agent: a flat node hierarchy, the occupational roles
referenced by those nodes, optional producer-supplied aggregation buckets
and report metadata.

Input is assumed to be validated upstream. The models only normalise shape
(legacy ``dominantRoleIds`` strings, ``onetCode`` role keys) so the
aggregation code can rely on one representation.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from workforce_exposure.models.base import FrozenCamelModel


class DominantRole(FrozenCamelModel):
    """
    Reference from an org node to one of the report's roles.

    Attributes:
        role_id: Role reference (occupation code, or a title)
        headcount: People in this node holding the role, if known
    """
    role_id: str = Field(validation_alias=AliasChoices("roleId", "role_id", "id", "code"))
    headcount: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_id(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"roleId": data}
        return data

    @field_validator("headcount", mode="before")
    @classmethod
    def _truncate_headcount(cls, value: Any) -> Any:
        if isinstance(value, float):
            value = int(value)
        if isinstance(value, int) and value < 0:
            return 0
        return value

    @property
    def key(self) -> str:
        """Lookup key: trimmed, lowercased reference."""
        return self.role_id.strip().lower()


class OrgNode(FrozenCamelModel):
    """
    One unit in a company's reporting hierarchy.

    Attributes:
        id: Node identifier, unique within the report
        name: Display name
        level: Depth hint supplied by the producer
        parent_id: Parent node id (None for roots)
        headcount: People in this unit, if known
        automation_share: Estimated automation share in [0, 1]
        augmentation_share: Estimated augmentation share in [0, 1]
        dominant_roles: Roles that make up most of the unit
    """
    id: str
    name: str
    level: int = 0
    parent_id: Optional[str] = None
    headcount: Optional[int] = None
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None
    dominant_roles: List[DominantRole] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_dominant_role_ids(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        has_roles = any(key in data for key in ("dominantRoles", "dominant_roles"))
        legacy = data.get("dominantRoleIds", data.get("dominant_role_ids"))
        if not has_roles and legacy is not None:
            data = dict(data)
            data.pop("dominantRoleIds", None)
            data.pop("dominant_role_ids", None)
            data["dominantRoles"] = legacy
        return data

    @field_validator("parent_id", mode="before")
    @classmethod
    def _blank_parent_is_root(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TopTask(FrozenCamelModel):
    """A task with its automation/augmentation usage scores."""
    name: str
    automation: Optional[float] = None
    augmentation: Optional[float] = None
    weight: Optional[float] = None


class TaskMixCounts(FrozenCamelModel):
    """Number of a role's tasks in each bucket."""
    automation: int = 0
    augmentation: int = 0
    manual: int = 0

    @field_validator("automation", "augmentation", "manual", mode="before")
    @classmethod
    def _non_negative(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, float):
            value = int(value)
        if isinstance(value, int) and value < 0:
            return 0
        return value

    @property
    def total(self) -> int:
        return self.automation + self.augmentation + self.manual


class TaskMixShares(FrozenCamelModel):
    """Fraction of a role's work in each bucket."""
    automation: Optional[float] = None
    augmentation: Optional[float] = None
    manual: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.automation is None and self.augmentation is None and self.manual is None


class OrgRole(FrozenCamelModel):
    """
    A canonical occupation record referenced by the hierarchy.

    Attributes:
        code: Occupation code (O*NET-SOC), also accepted as ``onetCode``
        title: Occupation title
        normalized_title: Lowercased title used for catalog matching
        parent_cluster: Sector the occupation belongs to
        headcount: Role headcount reported directly, if any
        automation_share: Role-level automation share
        augmentation_share: Role-level augmentation share
        task_mix_counts: Stored task classification counts
        task_mix_shares: Stored task classification shares
        top_tasks: Tasks with usage scores, used when counts are absent
    """
    code: str = Field(validation_alias=AliasChoices("code", "onetCode", "onet_code"))
    title: str
    normalized_title: Optional[str] = None
    parent_cluster: Optional[str] = None
    headcount: Optional[int] = None
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None
    task_mix_counts: Optional[TaskMixCounts] = None
    task_mix_shares: Optional[TaskMixShares] = None
    top_tasks: List[TopTask] = Field(default_factory=list)

    @property
    def display_title(self) -> str:
        return (self.title or "").strip() or self.normalized_title or self.code


class AggregationType(str, Enum):
    """Dimension a producer-supplied aggregation is grouped by."""
    FUNCTION = "function"
    GEOGRAPHY = "geography"
    BUSINESS_UNIT = "business_unit"
    SENIORITY = "seniority"
    OTHER = "other"


class AggregationBucket(FrozenCamelModel):
    """One named bucket of an aggregation (e.g. 'EMEA', 'Finance')."""
    key: str
    headcount: Optional[float] = None
    automation_share: Optional[float] = None
    augmentation_share: Optional[float] = None
    notes: Optional[str] = None


class Aggregation(FrozenCamelModel):
    """Producer-supplied grouping of the workforce."""
    type: AggregationType = AggregationType.OTHER
    label: str
    buckets: List[AggregationBucket] = Field(default_factory=list)


class ReportMetadata(FrozenCamelModel):
    """Descriptive report metadata."""
    company_name: Optional[str] = None
    company_slug: Optional[str] = None
    hq_country: Optional[str] = None
    industry: Optional[str] = None
    workforce_estimate: Optional[int] = None


class OrgReport(FrozenCamelModel):
    """
    A finished organisational report for one company.

    Attributes:
        metadata: Company metadata, including the declared workforce estimate
        hierarchy: Flat list of org nodes
        roles: Roles referenced by the hierarchy
        aggregations: Optional producer-supplied buckets
    """
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)
    hierarchy: List[OrgNode] = Field(default_factory=list)
    roles: List[OrgRole] = Field(default_factory=list)
    aggregations: List[Aggregation] = Field(default_factory=list)

    @field_validator("aggregations", mode="before")
    @classmethod
    def _null_aggregations(cls, value: Any) -> Any:
        return [] if value is None else value
