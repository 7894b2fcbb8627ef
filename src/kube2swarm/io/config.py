"""Configuration file handling — load kube2swarm.yaml."""

import os
import sys

import yaml

from kube2swarm.core.constants import (
    DEFAULT_MATCHER, DEFAULT_WORKLOAD_KINDS, PUBLISHED_SUFFIX,
    RANDOM_PORTS_SUFFIX, SERVICE_LABEL, STACK_LABEL,
)
from kube2swarm.core.errors import ConfigError


def _migrate_config(cfg: dict) -> bool:
    """Migrate legacy flat label keys. Returns True if migration happened."""
    migrated = False

    # serviceLabel → labels.service
    if "serviceLabel" in cfg:
        cfg.setdefault("labels", {})["service"] = cfg.pop("serviceLabel")
        migrated = True

    # stackLabel → labels.stack
    if "stackLabel" in cfg:
        cfg.setdefault("labels", {})["stack"] = cfg.pop("stackLabel")
        migrated = True

    return migrated


def load_config(path: str) -> dict:
    """Load kube2swarm.yaml or return the default config."""
    if os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML: {exc.__class__.__name__}", path=path) from exc
        if not isinstance(cfg, dict):
            raise ConfigError("top-level document must be a mapping", path=path)
    else:
        cfg = {}

    if _migrate_config(cfg):
        print("Config migrated to nested label keys in memory", file=sys.stderr)

    labels = cfg.setdefault("labels", {})
    labels.setdefault("service", SERVICE_LABEL)
    labels.setdefault("stack", STACK_LABEL)
    cfg.setdefault("matcher", DEFAULT_MATCHER)
    suffixes = cfg.setdefault("suffixes", {})
    suffixes.setdefault("published", PUBLISHED_SUFFIX)
    suffixes.setdefault("random_ports", RANDOM_PORTS_SUFFIX)
    cfg.setdefault("workload_kinds", list(DEFAULT_WORKLOAD_KINDS))
    return cfg
