"""kube2swarm — reconcile Kubernetes workloads and Services into swarm services.

Re-exports the public API for extensions.
Extensions can import directly from here or from kube2swarm.pacts.
"""

from kube2swarm.pacts.types import (
    WorkloadKind, ExposureKind, PublishMode, Protocol,
    Workload, ServicePort, NetworkExposure, ReconcileContext,
    ReplicatedMode, GlobalMode, ServiceMode, ServiceStatus, PortConfig,
    UnifiedService,
)
from kube2swarm.pacts.matchers import ExposureMatcher, SuffixMatcher, LabelMatcher
from kube2swarm.core.errors import (
    ReconcileError, AssociationNotFound, MissingServiceLabel, MalformedObject,
)
from kube2swarm.core.reconcile import reconcile
from kube2swarm.core.ports import convert_ports, resolve_target_port, workload_mode

__all__ = [
    # Types & enums
    "WorkloadKind",
    "ExposureKind",
    "PublishMode",
    "Protocol",
    "Workload",
    "ServicePort",
    "NetworkExposure",
    "ReconcileContext",
    "ReplicatedMode",
    "GlobalMode",
    "ServiceMode",
    "ServiceStatus",
    "PortConfig",
    "UnifiedService",
    # Matchers
    "ExposureMatcher",
    "SuffixMatcher",
    "LabelMatcher",
    # Errors
    "ReconcileError",
    "AssociationNotFound",
    "MissingServiceLabel",
    "MalformedObject",
    # Reconciliation
    "reconcile",
    "convert_ports",
    "resolve_target_port",
    "workload_mode",
]
