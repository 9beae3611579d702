"""Output models for cluster costs."""

import math

from pydantic import BaseModel, ConfigDict, Field

from cluster_costs.prometheus.results import Sample

CostPair = tuple[str, str]  # (timestamp, value), both "%f" formatted


def format_float(value: float) -> str:
    """Format a float with six fractional digits, spelling NaN and infinities."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return f"{value:f}"


def sample_to_pair(sample: Sample) -> CostPair:
    """Convert a sample into a string-encoded (timestamp, value) pair."""
    return (format_float(sample.timestamp), format_float(sample.value))


class Totals(BaseModel):
    """
    Monthly-rate cost of one cluster, or one time-series.

    Each field is a list of (timestamp, value) pairs. An empty list means the
    dimension returned no data, which is distinct from a zero cost.

    Serialized field names (totalcost, cpucost, memcost, storageCost) are part
    of the public output format.
    """

    model_config = ConfigDict(populate_by_name=True)

    total_cost: list[CostPair] = Field(default_factory=list, alias="totalcost")
    cpu_cost: list[CostPair] = Field(default_factory=list, alias="cpucost")
    mem_cost: list[CostPair] = Field(default_factory=list, alias="memcost")
    storage_cost: list[CostPair] = Field(default_factory=list, alias="storageCost")

    def to_dict(self) -> dict:
        """Serialize using the public field names."""
        return self.model_dump(by_alias=True, mode="json")
