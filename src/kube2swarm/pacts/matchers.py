"""Exposure matchers — tie externally-reachable Services to a logical service.

Kubernetes Services carry no reference to the workload they publish for.
A matcher decides, for one LoadBalancer or NodePort Service, which logical
service its ports belong to. Stack compatibility is checked by the
reconciler, matchers only look at the Service itself.
"""

from kube2swarm.core.constants import PUBLISHED_SUFFIX, RANDOM_PORTS_SUFFIX
from kube2swarm.pacts.types import ExposureKind, NetworkExposure, ReconcileContext


class ExposureMatcher:
    """Base class for exposure matchers.

    Subclass and set *name* to register a new association convention.
    Extensions found by ``--extensions-dir`` override built-ins that share
    their name.
    """
    name: str = ""
    priority: int = 1000

    def service_for(self, exposure: NetworkExposure, ctx: ReconcileContext) -> str | None:
        """Return the logical service *exposure* publishes ports for, or None."""
        return None


class SuffixMatcher(ExposureMatcher):
    """compose-on-kubernetes naming: <svc>-published and <svc>-random-ports."""
    name = "suffix"
    priority = 100

    def service_for(self, exposure, ctx):
        suffixes = ctx.config.get("suffixes") or {}
        if exposure.kind is ExposureKind.LOAD_BALANCER:
            suffix = suffixes.get("published", PUBLISHED_SUFFIX)
        elif exposure.kind is ExposureKind.NODE_PORT:
            suffix = suffixes.get("random_ports", RANDOM_PORTS_SUFFIX)
        else:
            return None
        if suffix and exposure.name.endswith(suffix) and len(exposure.name) > len(suffix):
            return exposure.name[:-len(suffix)]
        return None


class LabelMatcher(ExposureMatcher):
    """Services labelled with the service name publish for that service."""
    name = "label"
    priority = 200

    def service_for(self, exposure, ctx):
        if not exposure.kind.external:
            return None
        return exposure.service_label or None


BUILTIN_MATCHERS = (SuffixMatcher, LabelMatcher)
