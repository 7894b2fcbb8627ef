"""Exceptions raised by the reconciler, config loader and filters."""


class ReconcileError(ValueError):
    """Base class for snapshots that cannot be turned into swarm services."""


class AssociationNotFound(ReconcileError):
    """Raised when a workload has no matching ClusterIP Service."""

    def __init__(self, service_name: str | None, *, workload: str | None = None):
        if service_name is None:
            detail = f"could not find service for workload '{workload}'"
        else:
            detail = f"could not find service for '{service_name}'"
        super().__init__(detail)
        self.service_name = service_name
        self.workload = workload


class MissingServiceLabel(AssociationNotFound):
    """Raised when a workload carries no service-name label."""

    def __init__(self, workload: str, *, label: str):
        super().__init__(None, workload=workload)
        self.label = label
        self.args = (f"{self.args[0]}: missing label '{label}'",)


class MalformedObject(ReconcileError):
    """Raised for objects whose shape the conversion cannot use."""

    def __init__(self, kind: str, name: str, detail: str):
        super().__init__(f"{kind} '{name}': {detail}")
        self.kind = kind
        self.name = name


class ConfigError(RuntimeError):
    """Raised when reading the configuration file fails."""

    def __init__(self, message: str, *, path: str | None = None):
        detail = message if path is None else f"{message} (path={path})"
        super().__init__(detail)
        self.path = path


class InvalidFilter(ValueError):
    """Raised for --filter expressions the service listing does not support."""
