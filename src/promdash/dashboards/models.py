"""Grafana panel models used when generating panels from metrics."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Target:
    """Prometheus query target for a panel."""

    expr: str  # PromQL expression
    ref_id: str = "A"
    legend_format: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"refId": self.ref_id, "expr": self.expr}
        if self.legend_format is not None:
            result["legendFormat"] = self.legend_format
        return result


@dataclass
class Panel:
    """Panel definition in the loose shape accepted by ``build_dashboard``."""

    title: str
    targets: List[Target] = field(default_factory=list)
    panel_type: str = "timeseries"  # timeseries, gauge, stat, table
    description: Optional[str] = None
    unit: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "title": self.title,
            "type": self.panel_type,
            "targets": [t.to_dict() for t in self.targets],
        }
        if self.unit:
            result["fieldConfig"] = {
                "defaults": {
                    "unit": self.unit,
                    "color": {"mode": "palette-classic"},
                },
            }
        if self.description:
            result["description"] = self.description
        return result
