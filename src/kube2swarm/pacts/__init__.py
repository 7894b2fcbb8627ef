"""Public contracts for extensions — the sacred pacts."""

from kube2swarm.pacts.types import (
    ExposureKind, NetworkExposure, ReconcileContext, ServicePort,
)
from kube2swarm.pacts.matchers import ExposureMatcher, SuffixMatcher, LabelMatcher

__all__ = [
    "ExposureKind",
    "NetworkExposure",
    "ReconcileContext",
    "ServicePort",
    "ExposureMatcher",
    "SuffixMatcher",
    "LabelMatcher",
]
