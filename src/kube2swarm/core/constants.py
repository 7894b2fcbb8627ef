"""Label keys, naming conventions and kind tables shared across the engine."""

# compose-on-kubernetes stamps every generated object with these labels
SERVICE_LABEL = "com.docker.service.name"
STACK_LABEL = "com.docker.stack.namespace"

# Externally-reachable Services are named <service><suffix>
PUBLISHED_SUFFIX = "-published"
RANDOM_PORTS_SUFFIX = "-random-ports"

# Qualified name separator: <stack>_<service>
NAME_SEPARATOR = "_"

# Workload kinds read from a snapshot unless the config says otherwise
DEFAULT_WORKLOAD_KINDS = ("Deployment", "ReplicaSet", "StatefulSet", "DaemonSet")

# Service types with no swarm counterpart (skipped with a warning)
UNSUPPORTED_SERVICE_TYPES = ("ExternalName",)

# Default matcher name (see pacts.matchers)
DEFAULT_MATCHER = "suffix"
