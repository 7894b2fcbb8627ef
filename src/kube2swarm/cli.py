"""CLI entry point — argument parsing, orchestration."""

import argparse
import os
import sys

from kube2swarm.core.errors import ConfigError, InvalidFilter, ReconcileError
from kube2swarm.core.extensions import build_registry, load_extensions, select_matcher
from kube2swarm.core.filters import filter_services, parse_filters
from kube2swarm.core.reconcile import reconcile
from kube2swarm.io.config import load_config
from kube2swarm.io.output import FORMATTERS, emit_warnings, format_ids
from kube2swarm.io.parsing import (
    exposures_from_manifests, parse_manifests, select_stack, workloads_from_manifests,
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kube2swarm",
        description="List the services of a stack deployed on Kubernetes, swarm style",
    )
    parser.add_argument(
        "stack", nargs="?",
        help="Only list services of this stack (default: every stack in the snapshot)",
    )
    parser.add_argument(
        "--from", dest="source", required=True,
        help="Manifest file or directory (rendered YAML or kubectl get -o yaml output)",
    )
    parser.add_argument(
        "--config", default="kube2swarm.yaml",
        help="Configuration file (default: kube2swarm.yaml)",
    )
    parser.add_argument(
        "--matcher",
        help="How published Services are tied to a service (default from config: suffix)",
    )
    parser.add_argument(
        "--extensions-dir",
        help="Directory containing extra matcher modules",
    )
    parser.add_argument(
        "-f", "--filter", action="append", default=[],
        help="Filter output based on conditions provided (id, label, mode, name)",
    )
    parser.add_argument(
        "--format", choices=sorted(FORMATTERS), default="table",
        help="Output format (default: table)",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true",
        help="Only display IDs",
    )
    return parser


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    """CLI entry point."""
    args = _build_parser().parse_args(argv)

    if not os.path.exists(args.source):
        _fail(f"manifest path not found: {args.source}")
    if args.extensions_dir and not os.path.isdir(args.extensions_dir):
        _fail(f"extensions directory not found: {args.extensions_dir}")

    warnings: list[str] = []
    try:
        # Step 1: config, matcher, filters
        config = load_config(args.config)
        if args.matcher:
            config["matcher"] = args.matcher
        extra = load_extensions(args.extensions_dir) if args.extensions_dir else []
        matcher = select_matcher(build_registry(extra), config["matcher"])
        filters = parse_filters(args.filter)

        # Step 2: parse
        manifests = parse_manifests(args.source)
        kinds = {k: len(v) for k, v in manifests.items()}
        print(f"Parsed manifests: {kinds}", file=sys.stderr)
        workloads = workloads_from_manifests(manifests, config)
        exposures = exposures_from_manifests(manifests, config, warnings)
        if args.stack:
            workloads, exposures = select_stack(workloads, exposures, args.stack)

        # Step 3: reconcile
        services = reconcile(workloads, exposures, matcher=matcher,
                             config=config, warnings=warnings)
    except (ReconcileError, ConfigError, InvalidFilter) as exc:
        emit_warnings(warnings)
        _fail(str(exc))

    emit_warnings(warnings)

    # Step 4: filter and print
    services = filter_services(services, filters)
    if not services:
        print(f"Nothing found in stack: {args.stack or '(all)'}", file=sys.stderr)
        return
    if args.quiet:
        sys.stdout.write(format_ids(services))
    else:
        sys.stdout.write(FORMATTERS[args.format](services))


if __name__ == "__main__":
    main()
