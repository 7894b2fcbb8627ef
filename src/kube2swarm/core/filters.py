"""Service filters — ``--filter key=value`` as in ``docker stack services``."""

from kube2swarm.core.errors import InvalidFilter
from kube2swarm.pacts.types import UnifiedService

SUPPORTED_FILTERS = ("id", "label", "mode", "name")
MODES = ("replicated", "global")


def parse_filters(expressions: list[str] | None) -> dict[str, list[str]]:
    """Parse ``key=value`` expressions into {key: [values]}."""
    filters: dict[str, list[str]] = {}
    for expr in expressions or []:
        key, sep, value = expr.partition("=")
        key = key.strip().lower()
        if not sep:
            raise InvalidFilter(f"bad format of filter (expected name=value): {expr}")
        if key not in SUPPORTED_FILTERS:
            raise InvalidFilter(f"invalid filter '{key}'")
        if key == "mode" and value not in MODES:
            raise InvalidFilter(f"invalid filter 'mode={value}'")
        filters.setdefault(key, []).append(value)
    return filters


def _match_label(labels: dict, expr: str) -> bool:
    key, sep, value = expr.partition("=")
    if key not in labels:
        return False
    return not sep or labels[key] == value


def _matches(svc: UnifiedService, filters: dict[str, list[str]]) -> bool:
    """Values of one key are OR'ed, keys are AND'ed (label values are AND'ed)."""
    ids = filters.get("id")
    if ids and not any(svc.id.startswith(v) for v in ids):
        return False
    names = filters.get("name")
    if names and not any(svc.name.startswith(v) or svc.service_name.startswith(v)
                         for v in names):
        return False
    modes = filters.get("mode")
    if modes and svc.mode_name not in modes:
        return False
    return all(_match_label(svc.labels, expr) for expr in filters.get("label", []))


def filter_services(services: list[UnifiedService],
                    filters: dict[str, list[str]]) -> list[UnifiedService]:
    """Keep the services matching every filter, preserving order."""
    if not filters:
        return list(services)
    return [svc for svc in services if _matches(svc, filters)]
