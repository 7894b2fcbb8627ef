"""Public data types for extensions — the sacred contracts."""

from dataclasses import dataclass, field
from enum import Enum


class WorkloadKind(str, Enum):
    """Kubernetes workload controllers the reconciler understands."""

    DEPLOYMENT = "Deployment"
    REPLICA_SET = "ReplicaSet"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"  # one instance per eligible node

    @property
    def node_resident(self) -> bool:
        return self is WorkloadKind.DAEMON_SET


class ExposureKind(str, Enum):
    """Kubernetes Service types that map onto swarm endpoints."""

    CLUSTER_IP = "ClusterIP"  # internal only, anchors the swarm service identity
    LOAD_BALANCER = "LoadBalancer"  # published through the routing mesh
    NODE_PORT = "NodePort"  # published on every node

    @property
    def external(self) -> bool:
        return self is not ExposureKind.CLUSTER_IP


class PublishMode(str, Enum):
    """Swarm port publish modes."""

    INGRESS = "ingress"
    HOST = "host"


class Protocol(str, Enum):
    """Transport protocols, spelled the swarm way."""

    TCP = "tcp"
    UDP = "udp"
    SCTP = "sctp"

    @classmethod
    def parse(cls, value: str | None) -> "Protocol":
        """Parse a Kubernetes protocol ("TCP", "UDP", "SCTP"); absent means TCP."""
        if not value:
            return cls.TCP
        return cls(str(value).lower())


# --- Input descriptors ---


@dataclass(frozen=True)
class Workload:
    """One workload controller, reduced to what the reconciler needs.

    For replica-counted kinds *desired* is the declared replica count and
    *available* the number of available replicas. For DaemonSets *desired*
    is the number of nodes the pod should be scheduled on and *available*
    the number of available pods (status.numberAvailable).
    """
    kind: WorkloadKind
    name: str
    service_name: str | None
    stack: str | None = None
    desired: int = 0
    available: int = 0
    image: str = ""
    container_ports: tuple = ()
    labels: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ServicePort:
    """One entry of a Service's spec.ports."""
    port: int
    target_port: int | str | None = None
    protocol: Protocol = Protocol.TCP
    node_port: int | None = None
    name: str = ""


@dataclass(frozen=True)
class NetworkExposure:
    """One Kubernetes Service."""
    uid: str
    name: str
    kind: ExposureKind
    stack: str | None = None
    service_label: str | None = None
    ports: tuple[ServicePort, ...] = ()
    labels: dict = field(default_factory=dict)


@dataclass
class ReconcileContext:
    """Shared state passed to matchers during a reconciliation pass."""
    config: dict = field(default_factory=dict)
    warnings: list = field(default_factory=list)


# --- Output: swarm service ---


@dataclass(frozen=True)
class ReplicatedMode:
    replicas: int


@dataclass(frozen=True)
class GlobalMode:
    pass


ServiceMode = ReplicatedMode | GlobalMode


@dataclass(frozen=True)
class ServiceStatus:
    running_tasks: int
    desired_tasks: int


@dataclass(frozen=True)
class PortConfig:
    publish_mode: PublishMode
    published_port: int
    target_port: int
    protocol: Protocol = Protocol.TCP

    def to_dict(self) -> dict:
        return {
            "Protocol": self.protocol.value,
            "TargetPort": self.target_port,
            "PublishedPort": self.published_port,
            "PublishMode": self.publish_mode.value,
        }


@dataclass(frozen=True)
class UnifiedService:
    """A swarm-style service merged from a workload and its Services."""
    id: str
    name: str
    service_name: str
    stack: str | None
    image: str
    mode: ServiceMode
    status: ServiceStatus
    ports: tuple[PortConfig, ...] = ()
    labels: dict = field(default_factory=dict)

    @property
    def mode_name(self) -> str:
        return "global" if isinstance(self.mode, GlobalMode) else "replicated"

    @property
    def replicas(self) -> str:
        return f"{self.status.running_tasks}/{self.status.desired_tasks}"

    def to_dict(self) -> dict:
        """Render the service in the swarm API shape (docker service inspect)."""
        if isinstance(self.mode, GlobalMode):
            mode = {"Global": {}}
        else:
            mode = {"Replicated": {"Replicas": self.mode.replicas}}
        spec = {
            "Name": self.name,
            "Labels": dict(self.labels),
            "TaskTemplate": {"ContainerSpec": {"Image": self.image}},
            "Mode": mode,
        }
        out = {"ID": self.id, "Spec": spec}
        if self.ports:
            out["Endpoint"] = {"Ports": [p.to_dict() for p in self.ports]}
        out["ServiceStatus"] = {
            "RunningTasks": self.status.running_tasks,
            "DesiredTasks": self.status.desired_tasks,
        }
        return out
