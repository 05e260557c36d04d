"""
Data models for PromQL query generation.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

NO_METADATA_HELP = "No metadata available"


class MetricType(str, Enum):
    """Prometheus metric types."""
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "MetricType":
        """Map a Prometheus metadata type string, falling back to UNKNOWN."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class MetricInfo(BaseModel):
    """Metadata about a single Prometheus metric."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Metric name")
    type: MetricType = Field(MetricType.UNKNOWN, description="Metric type")
    help: str = Field("", description="Help text from Prometheus metadata")
    labels: List[str] = Field(default_factory=list, description="Label names")

    @property
    def has_metadata(self) -> bool:
        return bool(self.help) and self.help != NO_METADATA_HELP


class QuerySuggestion(BaseModel):
    """A candidate PromQL query for a metric."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(..., description="PromQL expression")
    description: str = Field("", description="Human-readable description")
    visualization_type: str = Field("timeseries", description="timeseries, stat, gauge or table")
    y_axis_label: str = Field("value", description="Y axis label")
