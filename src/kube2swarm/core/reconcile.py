"""Reconciliation — workloads + Services → swarm services.

A swarm service is assembled from three independent Kubernetes objects:
the workload (mode and task counters), the ClusterIP Service named after
the logical service (identity) and any number of externally-reachable
Services (published ports). They are joined on labels and names only.
"""

from collections.abc import Iterable

from kube2swarm.core.constants import NAME_SEPARATOR, SERVICE_LABEL
from kube2swarm.core.errors import AssociationNotFound, MissingServiceLabel
from kube2swarm.core.ports import convert_ports, workload_mode
from kube2swarm.pacts.matchers import ExposureMatcher, SuffixMatcher
from kube2swarm.pacts.types import (
    ExposureKind, NetworkExposure, ReconcileContext, UnifiedService, Workload,
)


def _stack_compatible(a: str | None, b: str | None) -> bool:
    """Stacks only have to agree when both sides declare one."""
    return a is None or b is None or a == b


def _index_internal(exposures: list[NetworkExposure]) -> tuple[dict, dict]:
    """Index ClusterIP Services by (stack, name) and by bare name.

    First occurrence wins in both maps.
    """
    by_key: dict[tuple[str | None, str], NetworkExposure] = {}
    by_name: dict[str, NetworkExposure] = {}
    for exposure in exposures:
        if exposure.kind is not ExposureKind.CLUSTER_IP:
            continue
        by_key.setdefault((exposure.stack, exposure.name), exposure)
        by_name.setdefault(exposure.name, exposure)
    return by_key, by_name


def _index_external(exposures: list[NetworkExposure], matcher: ExposureMatcher,
                    ctx: ReconcileContext) -> dict[str, list[NetworkExposure]]:
    """Group external Services by the logical service the matcher assigns them to."""
    by_service: dict[str, list[NetworkExposure]] = {}
    for exposure in exposures:
        if not exposure.kind.external:
            continue
        service_name = matcher.service_for(exposure, ctx)
        if service_name:
            by_service.setdefault(service_name, []).append(exposure)
    return by_service


def _find_internal(service_name: str, stack: str | None,
                   by_key: dict, by_name: dict) -> NetworkExposure | None:
    if stack is None:
        return by_name.get(service_name)
    return by_key.get((stack, service_name)) or by_key.get((None, service_name))


def _qualified_name(exposure: NetworkExposure) -> str:
    if exposure.stack:
        return f"{exposure.stack}{NAME_SEPARATOR}{exposure.name}"
    return exposure.name


def _convert_workload(workload: Workload, internal: NetworkExposure,
                      externals: list[NetworkExposure],
                      warnings: list[str]) -> UnifiedService:
    mode, status = workload_mode(workload)
    ports = []
    for exposure in externals:
        if not _stack_compatible(exposure.stack, internal.stack):
            continue
        ports.extend(convert_ports(exposure, workload.container_ports, warnings))
    return UnifiedService(
        id=internal.uid,
        name=_qualified_name(internal),
        service_name=internal.name,
        stack=internal.stack,
        image=workload.image,
        mode=mode,
        status=status,
        ports=tuple(ports),
        labels=dict(workload.labels),
    )


def reconcile(workloads: Iterable[Workload], exposures: Iterable[NetworkExposure],
              matcher: ExposureMatcher | None = None, config: dict | None = None,
              warnings: list[str] | None = None) -> list[UnifiedService]:
    """Merge a snapshot of workloads and Services into swarm services.

    Returns one service per workload, in workload order. Raises
    AssociationNotFound as soon as one workload cannot be tied to a
    ClusterIP Service; nothing is returned in that case. Non-fatal
    problems (unresolved named ports) are appended to *warnings*.
    """
    config = config if config is not None else {}
    warnings = warnings if warnings is not None else []
    matcher = matcher or SuffixMatcher()
    ctx = ReconcileContext(config=config, warnings=warnings)
    label = (config.get("labels") or {}).get("service", SERVICE_LABEL)

    exposures = list(exposures)
    by_key, by_name = _index_internal(exposures)
    externals = _index_external(exposures, matcher, ctx)

    result: list[UnifiedService] = []
    for workload in workloads:
        if not workload.service_name:
            raise MissingServiceLabel(workload.name, label=label)
        internal = _find_internal(workload.service_name, workload.stack, by_key, by_name)
        if internal is None:
            raise AssociationNotFound(workload.service_name, workload=workload.name)
        result.append(_convert_workload(
            workload, internal, externals.get(internal.name, []), warnings))
    return result
