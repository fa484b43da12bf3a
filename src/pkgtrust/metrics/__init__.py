"""Metric providers, one normalized score in [0, 1] each."""

from pkgtrust.metrics.base import GitHubMetric, MetricFunction
from pkgtrust.metrics.bus_factor import BusFactorMetric
from pkgtrust.metrics.correctness import CorrectnessMetric
from pkgtrust.metrics.license import LicenseMetric
from pkgtrust.metrics.ramp_up import RampUpMetric
from pkgtrust.metrics.responsiveness import ResponsivenessMetric

__all__ = [
    "BusFactorMetric",
    "CorrectnessMetric",
    "GitHubMetric",
    "LicenseMetric",
    "MetricFunction",
    "RampUpMetric",
    "ResponsivenessMetric",
]
