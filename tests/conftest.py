"""Pytest configuration and shared builders."""

import pytest

from kube2swarm.core.constants import SERVICE_LABEL, STACK_LABEL
from kube2swarm.pacts.types import (
    ExposureKind, NetworkExposure, Protocol, ReplicatedMode,
    ServicePort, ServiceStatus, UnifiedService, Workload, WorkloadKind,
)


def make_replica_set(service, available, replicas, stack=None, **kwargs):
    """ReplicaSet descriptor labelled with *service* (and *stack* if given)."""
    labels = {SERVICE_LABEL: service}
    if stack:
        labels[STACK_LABEL] = stack
    return Workload(
        kind=kwargs.pop("kind", WorkloadKind.REPLICA_SET),
        name=kwargs.pop("name", f"{service}-6d4cf56db6"),
        service_name=service,
        stack=stack,
        desired=replicas,
        available=available,
        image=kwargs.pop("image", "image"),
        labels=labels,
        **kwargs,
    )


def make_daemon_set(service, ready, desired, stack=None, **kwargs):
    return make_replica_set(service, ready, desired, stack=stack,
                            kind=WorkloadKind.DAEMON_SET, name=service, **kwargs)


def make_kube_service(name, stack, uid, kind=ExposureKind.CLUSTER_IP, ports=None,
                      service_label=None):
    labels = {STACK_LABEL: stack} if stack else {}
    if service_label:
        labels[SERVICE_LABEL] = service_label
    return NetworkExposure(
        uid=uid,
        name=name,
        kind=kind,
        stack=stack,
        service_label=service_label,
        ports=tuple(ports or ()),
        labels=labels,
    )


def tcp(port, target=None, node_port=None):
    return ServicePort(port=port, target_port=target, protocol=Protocol.TCP,
                       node_port=node_port)


def make_swarm_service(name, uid, mode=None, status=None, ports=(), stack="stack",
                       service_name=None, image="image"):
    """Expected UnifiedService for a workload built by make_replica_set without a stack."""
    if service_name is None:
        service_name = name.split("_", 1)[1] if stack else name
    if mode is None:
        mode = ReplicatedMode(replicas=1)
    if status is None:
        status = ServiceStatus(running_tasks=0, desired_tasks=mode.replicas)
    return UnifiedService(
        id=uid,
        name=name,
        service_name=service_name,
        stack=stack,
        image=image,
        mode=mode,
        status=status,
        ports=tuple(ports),
        labels={SERVICE_LABEL: service_name},
    )


def manifest(kind, name, labels=None, spec=None, status=None, **meta):
    """Raw Kubernetes manifest dict."""
    doc = {
        "apiVersion": "v1" if kind == "Service" else "apps/v1",
        "kind": kind,
        "metadata": {"name": name, "labels": labels or {}, **meta},
        "spec": spec or {},
    }
    if status is not None:
        doc["status"] = status
    return doc


@pytest.fixture
def stack_manifests():
    """A two-service stack: a replicated web front and a global agent."""
    stack = {STACK_LABEL: "demo"}
    pod = {"template": {"spec": {"containers": [
        {"name": "web", "image": "nginx:1.25", "ports": [{"name": "http", "containerPort": 8080}]},
    ]}}}
    agent_pod = {"template": {"spec": {"containers": [{"name": "agent", "image": "agent:2"}]}}}
    return [
        manifest("Deployment", "web", {SERVICE_LABEL: "web", **stack},
                 spec={"replicas": 3, **pod},
                 status={"replicas": 3, "availableReplicas": 2}),
        manifest("DaemonSet", "agent", {SERVICE_LABEL: "agent", **stack},
                 spec=agent_pod,
                 status={"desiredNumberScheduled": 4, "numberReady": 4,
                         "numberAvailable": 4}),
        manifest("Service", "web", stack, spec={"clusterIP": "None"}, uid="uid-web"),
        manifest("Service", "agent", stack, spec={"clusterIP": "None"}, uid="uid-agent"),
        manifest("Service", "web-published", stack, uid="uid-web-lb", spec={
            "type": "LoadBalancer",
            "ports": [{"port": 80, "targetPort": "http", "protocol": "TCP"}],
        }),
        manifest("Service", "agent-random-ports", stack, uid="uid-agent-np", spec={
            "type": "NodePort",
            "ports": [{"port": 9100, "targetPort": 9100, "nodePort": 31000, "protocol": "UDP"}],
        }),
    ]
