"""Cross-company comparative analytics."""

from workforce_exposure.analytics.comparative import build_comparative_analytics
from workforce_exposure.analytics.stats import average, quantiles, weighted_average

__all__ = [
    "average",
    "build_comparative_analytics",
    "quantiles",
    "weighted_average",
]
