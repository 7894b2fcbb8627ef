"""Port and mode translation — Service ports to swarm PortConfigs, workloads to modes."""

from kube2swarm.core.errors import MalformedObject
from kube2swarm.pacts.types import (
    ExposureKind, GlobalMode, NetworkExposure, PortConfig, PublishMode,
    ReplicatedMode, ServiceMode, ServicePort, ServiceStatus, Workload,
)

# Service type → swarm publish mode (external kinds only)
PUBLISH_MODES = {
    ExposureKind.LOAD_BALANCER: PublishMode.INGRESS,
    ExposureKind.NODE_PORT: PublishMode.HOST,
}


def _resolve_named_port(name: str, container_ports: tuple | list) -> int | str:
    """Resolve a named port (e.g. 'http') to its numeric containerPort."""
    for cp in container_ports:
        if cp.get("name") == name:
            return cp["containerPort"]
    return name  # fallback: return as-is if not found


def resolve_target_port(sp: ServicePort, container_ports: tuple | list) -> int | str:
    """Resolve targetPort → containerPort, following Kubernetes defaulting.

    An absent targetPort means "same as port". Numeric strings are taken
    literally; anything else is looked up among the workload's container
    ports. Returns the name unchanged when the lookup fails.
    """
    target = sp.target_port
    if target is None or target == "":
        return sp.port
    if isinstance(target, int):
        return target
    if target.isdecimal() and target.isascii():
        return int(target)
    return _resolve_named_port(target, container_ports)


def _published_port(sp: ServicePort, publish_mode: PublishMode) -> int:
    """Port the outside world connects to."""
    if publish_mode is PublishMode.HOST and sp.node_port:
        return sp.node_port
    return sp.port


def convert_ports(exposure: NetworkExposure, container_ports: tuple | list,
                  warnings: list[str]) -> list[PortConfig]:
    """Translate every port of an external Service, in declared order."""
    publish_mode = PUBLISH_MODES.get(exposure.kind)
    if publish_mode is None:
        return []
    configs = []
    for sp in exposure.ports:
        target = resolve_target_port(sp, container_ports)
        if isinstance(target, str):
            warnings.append(
                f"Service '{exposure.name}': unresolved named targetPort '{target}'")
            target = 0
        configs.append(PortConfig(
            publish_mode=publish_mode,
            published_port=_published_port(sp, publish_mode),
            target_port=target,
            protocol=sp.protocol,
        ))
    return configs


def _counter(workload: Workload, field_name: str, value) -> int:
    """Validate a status counter (swarm counters are unsigned)."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise MalformedObject(workload.kind.value, workload.name,
                              f"{field_name} must be a non-negative integer, got {value!r}")
    return value


def workload_mode(workload: Workload) -> tuple[ServiceMode, ServiceStatus]:
    """Derive the swarm mode and task counters of a workload."""
    desired = _counter(workload, "desired", workload.desired)
    running = _counter(workload, "available", workload.available)
    if workload.kind.node_resident:
        mode: ServiceMode = GlobalMode()
    else:
        mode = ReplicatedMode(replicas=desired)
    return mode, ServiceStatus(running_tasks=running, desired_tasks=desired)
