"""Manifest parsing — YAML loading, workload and Service descriptors."""

import sys
from pathlib import Path

import yaml

from kube2swarm.core.constants import (
    DEFAULT_WORKLOAD_KINDS, SERVICE_LABEL, STACK_LABEL, UNSUPPORTED_SERVICE_TYPES,
)
from kube2swarm.core.errors import MalformedObject
from kube2swarm.pacts.types import (
    ExposureKind, NetworkExposure, Protocol, ServicePort, Workload, WorkloadKind,
)


def _yaml_files(path: Path) -> list[Path]:
    if path.is_file():
        return [path]
    return sorted(p for p in path.rglob("*") if p.suffix in (".yaml", ".yml") and p.is_file())


def _add_doc(manifests: dict[str, list[dict]], doc) -> None:
    """Classify one document by kind, flattening ``kind: List`` dumps."""
    if not doc or not isinstance(doc, dict):
        return
    kind = doc.get("kind", "Unknown")
    if not isinstance(kind, str):
        return
    if kind == "List" or (kind.endswith("List") and "items" in doc):
        for item in doc.get("items") or []:
            _add_doc(manifests, item)
        return
    manifests.setdefault(kind, []).append(doc)


def parse_manifests(path: str) -> dict[str, list[dict]]:
    """Load every YAML document under *path* (file or directory), classify by kind.

    Accepts rendered manifests as well as ``kubectl get -o yaml`` dumps.
    """
    manifests: dict[str, list[dict]] = {}
    for yaml_file in _yaml_files(Path(path)):
        try:
            with open(yaml_file, encoding="utf-8") as f:
                for doc in yaml.safe_load_all(f):
                    _add_doc(manifests, doc)
        except yaml.YAMLError as exc:
            print(f"⚠ Skipping {yaml_file.name}: {exc.__class__.__name__}",
                  file=sys.stderr)
    return manifests


def _label_keys(config: dict) -> tuple[str, str]:
    labels = config.get("labels") or {}
    return labels.get("service", SERVICE_LABEL), labels.get("stack", STACK_LABEL)


def _pod_containers(manifest: dict) -> list[dict]:
    pod_spec = ((manifest.get("spec") or {}).get("template") or {}).get("spec") or {}
    return pod_spec.get("containers") or []


def _owned_by(manifest: dict, kind: str, names: set[tuple[str, str]]) -> bool:
    """True if an ownerReference points at one of *names* ((namespace, name) pairs)."""
    ns = (manifest.get("metadata") or {}).get("namespace", "")
    for ref in (manifest.get("metadata") or {}).get("ownerReferences") or []:
        if ref.get("kind") == kind and (ns, ref.get("name", "")) in names:
            return True
    return False


def _workload_counters(kind: WorkloadKind, manifest: dict) -> tuple[int, int]:
    """Return (desired, available) for a workload manifest.

    Rendered manifests have no status; replica-counted workloads then fall
    back to spec.replicas (Kubernetes default 1).
    """
    spec = manifest.get("spec") or {}
    status = manifest.get("status") or {}
    if kind.node_resident:
        return status.get("desiredNumberScheduled", 0), status.get("numberAvailable", 0)
    if "replicas" in status:
        desired = status["replicas"]
    else:
        desired = spec.get("replicas", 1)
    return desired, status.get("availableReplicas", 0)


def _to_workload(kind: WorkloadKind, manifest: dict, config: dict) -> Workload:
    service_label, stack_label = _label_keys(config)
    meta = manifest.get("metadata") or {}
    labels = meta.get("labels") or {}
    containers = _pod_containers(manifest)
    container_ports = []
    for c in containers:
        container_ports.extend(c.get("ports") or [])
    desired, available = _workload_counters(kind, manifest)
    return Workload(
        kind=kind,
        name=meta.get("name", ""),
        service_name=labels.get(service_label),
        stack=labels.get(stack_label),
        desired=desired,
        available=available,
        image=containers[0].get("image", "") if containers else "",
        container_ports=tuple(container_ports),
        labels=dict(labels),
    )


def workloads_from_manifests(manifests: dict[str, list[dict]],
                             config: dict | None = None) -> list[Workload]:
    """Build workload descriptors for the configured kinds, kind by kind.

    ReplicaSets owned by a Deployment of the same snapshot are skipped: they
    describe the same logical service as their Deployment.
    """
    config = config or {}
    kinds = config.get("workload_kinds") or DEFAULT_WORKLOAD_KINDS
    deployments = set()
    if "Deployment" in kinds:
        deployments = {((m.get("metadata") or {}).get("namespace", ""),
                        (m.get("metadata") or {}).get("name", ""))
                       for m in manifests.get("Deployment", [])}
    workloads = []
    for kind_name in kinds:
        try:
            kind = WorkloadKind(kind_name)
        except ValueError:
            print(f"⚠ Unsupported workload kind '{kind_name}' in config, ignored",
                  file=sys.stderr)
            continue
        for m in manifests.get(kind_name, []):
            if kind is WorkloadKind.REPLICA_SET and _owned_by(m, "Deployment", deployments):
                continue
            workloads.append(_to_workload(kind, m, config))
    return workloads


def _to_service_port(svc_name: str, raw: dict) -> ServicePort:
    port = raw.get("port")
    if not isinstance(port, int) or isinstance(port, bool):
        raise MalformedObject("Service", svc_name, f"port must be an integer, got {port!r}")
    try:
        protocol = Protocol.parse(raw.get("protocol"))
    except ValueError as exc:
        raise MalformedObject("Service", svc_name,
                              f"unknown protocol {raw.get('protocol')!r}") from exc
    return ServicePort(
        port=port,
        target_port=raw.get("targetPort"),
        protocol=protocol,
        node_port=raw.get("nodePort"),
        name=raw.get("name", ""),
    )


def exposures_from_manifests(manifests: dict[str, list[dict]], config: dict | None = None,
                             warnings: list[str] | None = None) -> list[NetworkExposure]:
    """Build Service descriptors; unsupported Service types are skipped with a warning."""
    config = config or {}
    warnings = warnings if warnings is not None else []
    service_label, stack_label = _label_keys(config)
    exposures = []
    for m in manifests.get("Service", []):
        meta = m.get("metadata") or {}
        spec = m.get("spec") or {}
        name = meta.get("name", "")
        svc_type = spec.get("type") or "ClusterIP"
        if svc_type in UNSUPPORTED_SERVICE_TYPES:
            warnings.append(f"Service '{name}': type {svc_type} has no swarm equivalent — skipped")
            continue
        try:
            kind = ExposureKind(svc_type)
        except ValueError:
            warnings.append(f"Service '{name}': unknown type '{svc_type}' — skipped")
            continue
        labels = meta.get("labels") or {}
        ns = meta.get("namespace", "")
        exposures.append(NetworkExposure(
            uid=meta.get("uid") or (f"{ns}/{name}" if ns else name),
            name=name,
            kind=kind,
            stack=labels.get(stack_label),
            service_label=labels.get(service_label),
            ports=tuple(_to_service_port(name, p) for p in spec.get("ports") or []),
            labels=dict(labels),
        ))
    return exposures


def select_stack(workloads: list[Workload], exposures: list[NetworkExposure],
                 stack: str) -> tuple[list[Workload], list[NetworkExposure]]:
    """Restrict a snapshot to *stack*.

    Services without a stack label are kept: the reconciler lets them pair
    with any stack.
    """
    return ([w for w in workloads if w.stack == stack],
            [e for e in exposures if e.stack in (stack, None)])
