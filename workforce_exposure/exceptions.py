"""
Exception types for Workforce Exposure.

Data-quality problems (missing signal, unresolved references, malformed
stored metrics) never raise; they degrade to None results and
``ResolutionIssue`` records. Only build-time problems such as a broken
reference catalog surface as exceptions.
"""


class WorkforceExposureError(Exception):
    """Base class for all package errors."""


class CatalogError(WorkforceExposureError):
    """The occupational catalog is missing or malformed."""
