"""Configuration classes for schedgraph components."""

from dataclasses import dataclass, replace
from typing import Any

from schedgraph.algorithms.types import TopoMethod, WeightPolicy


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings for the end-to-end scheduling analysis."""

    # Strategy used to order the condensation graph
    topo_method: TopoMethod = TopoMethod.KAHN

    # Weight kept when several original edges join the same pair of SCCs
    weight_policy: WeightPolicy = WeightPolicy.FIRST

    # Vertex whose component seeds the shortest-path pass when none is given
    default_source: int = 0

    def with_overrides(self, **overrides: Any) -> "AnalysisConfig":
        """Return a copy with selected fields replaced.

        Enum fields accept member names (``"dfs"``, ``"min"``); ``None``
        values are ignored so CLI defaults can be passed through unchanged.

        Raises:
            ValueError: For unknown field names or invalid enum names.
        """
        updates = {k: v for k, v in overrides.items() if v is not None}
        unknown = set(updates) - set(self.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(sorted(unknown))}")
        if "topo_method" in updates:
            updates["topo_method"] = TopoMethod.coerce(updates["topo_method"])
        if "weight_policy" in updates:
            updates["weight_policy"] = WeightPolicy.coerce(updates["weight_policy"])
        if "default_source" in updates and int(updates["default_source"]) < 0:
            raise ValueError("default_source must be non-negative")
        return replace(self, **updates)


# Global configuration instance
DEFAULT_CONFIG = AnalysisConfig()
