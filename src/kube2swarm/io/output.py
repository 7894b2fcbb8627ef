"""Output rendering — service table, IDs, YAML/JSON, warnings."""

import json
import sys

import yaml

from kube2swarm.pacts.types import PortConfig, PublishMode, UnifiedService

TABLE_COLUMNS = ("ID", "NAME", "MODE", "REPLICAS", "IMAGE", "PORTS")


def format_port(port: PortConfig) -> str:
    """``*:80->80/tcp`` for routing-mesh ports, ``35666->80/tcp`` for host ports."""
    prefix = "*:" if port.publish_mode is PublishMode.INGRESS else ""
    return f"{prefix}{port.published_port}->{port.target_port}/{port.protocol.value}"


def _row(svc: UnifiedService) -> tuple[str, ...]:
    return (svc.id, svc.name, svc.mode_name, svc.replicas, svc.image,
            ", ".join(format_port(p) for p in svc.ports))


def format_table(services: list[UnifiedService]) -> str:
    """Render services as a ``docker stack services`` table."""
    rows = [TABLE_COLUMNS] + [_row(svc) for svc in services]
    widths = [max(len(r[i]) for r in rows) for i in range(len(TABLE_COLUMNS))]
    lines = []
    for r in rows:
        cells = [cell.ljust(w) for cell, w in zip(r[:-1], widths)] + [r[-1]]
        lines.append("   ".join(cells).rstrip())
    return "\n".join(lines) + "\n"


def format_ids(services: list[UnifiedService]) -> str:
    return "".join(f"{svc.id}\n" for svc in services)


def format_yaml(services: list[UnifiedService]) -> str:
    return yaml.dump([svc.to_dict() for svc in services],
                     default_flow_style=False, sort_keys=False)


def format_json(services: list[UnifiedService]) -> str:
    return json.dumps([svc.to_dict() for svc in services], indent=2) + "\n"


FORMATTERS = {
    "table": format_table,
    "yaml": format_yaml,
    "json": format_json,
}


def emit_warnings(warnings: list[str]) -> None:
    """Print all warnings to stderr."""
    for w in warnings:
        print(f"⚠ {w}", file=sys.stderr)
