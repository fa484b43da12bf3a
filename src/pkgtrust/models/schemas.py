"""Data models for package resolution and scoring results."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    """Source code hosting platforms."""

    GITHUB = "github"
    GITLAB = "gitlab"
    BITBUCKET = "bitbucket"


class Ecosystem(str, Enum):
    """Package ecosystems."""

    NPM = "npm"


class MetricName(str, Enum):
    """Report names of the scored metrics, in dispatch order."""

    RAMP_UP = "RampUp"
    CORRECTNESS = "Correctness"
    BUS_FACTOR = "BusFactor"
    RESPONSIVE_MAINTAINER = "ResponsiveMaintainer"
    LICENSE = "License"


class RepoRef(BaseModel):
    """Reference to a source code repository."""

    platform: Platform
    owner: str
    repo: str


class PackageMetadata(BaseModel):
    """Core package metadata from a registry."""

    ecosystem: Ecosystem
    name: str
    homepage: str | None = None
    repository_url: str | None = None


# --- Harness results ---


@dataclass(frozen=True)
class LatencyResult:
    """Outcome of one metric invocation.

    Exactly one of result/error is set; latency is always present.
    """

    latency: float
    result: float | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """True when the metric produced a score."""
        return self.error is None


@dataclass
class ConcurrentLatencies:
    """Index-aligned outcomes of a concurrent metric dispatch.

    Position i of every list corresponds to the i-th dispatched function.
    """

    latencies: list[float] = field(default_factory=list)
    results: list[float | None] = field(default_factory=list)
    errors: list[Exception | None] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.latencies)

    def __getitem__(self, index: int) -> LatencyResult:
        return LatencyResult(
            latency=self.latencies[index],
            result=self.results[index],
            error=self.errors[index],
        )

    def __iter__(self) -> Iterator[LatencyResult]:
        for i in range(len(self)):
            yield self[i]


# --- Score report ---


class ScoreReport(BaseModel):
    """Composite trust score for one URL.

    Serialized with the report key names (URL, NetScore, RampUp_Latency, ...)
    in declaration order.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str = Field(alias="URL")
    net_score: float = Field(alias="NetScore", ge=0, le=1)
    net_score_latency: float = Field(alias="NetScore_Latency")
    ramp_up: float = Field(alias="RampUp", ge=0, le=1)
    ramp_up_latency: float = Field(alias="RampUp_Latency")
    correctness: float = Field(alias="Correctness", ge=0, le=1)
    correctness_latency: float = Field(alias="Correctness_Latency")
    bus_factor: float = Field(alias="BusFactor", ge=0, le=1)
    bus_factor_latency: float = Field(alias="BusFactor_Latency")
    responsive_maintainer: float = Field(alias="ResponsiveMaintainer", ge=0, le=1)
    responsive_maintainer_latency: float = Field(alias="ResponsiveMaintainer_Latency")
    license: float = Field(alias="License", ge=0, le=1)
    license_latency: float = Field(alias="License_Latency")

    def metric(self, name: MetricName) -> tuple[float, float]:
        """Return (score, latency) for a metric."""
        data = self.model_dump(by_alias=True)
        return data[name.value], data[f"{name.value}_Latency"]

    def to_json(self) -> str:
        """Serialize as a single compact JSON line."""
        return self.model_dump_json(by_alias=True)
