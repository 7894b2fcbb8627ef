"""Extension discovery and loading — custom exposure matchers."""

import importlib.util
import sys
from pathlib import Path

from kube2swarm.core.errors import ConfigError
from kube2swarm.pacts.matchers import BUILTIN_MATCHERS, ExposureMatcher


def _visible_py(path: Path) -> bool:
    return path.is_file() and path.suffix == ".py" and not path.name.startswith(("_", "."))


def _extension_files(extensions_dir):
    """Yield matcher modules at the top of *extensions_dir* and one directory down."""
    for entry in sorted(Path(extensions_dir).iterdir()):
        if entry.name.startswith(("_", ".")):
            continue
        if entry.is_dir():
            yield from (p for p in sorted(entry.iterdir()) if _visible_py(p))
        elif _visible_py(entry):
            yield entry


def _is_matcher_class(obj, mod_name):
    """A class defined in *mod_name* with a non-empty ``name`` and a ``service_for``."""
    return (isinstance(obj, type)
            and isinstance(getattr(obj, 'name', None), str) and obj.name
            and callable(getattr(obj, 'service_for', None))
            and obj.__module__ == mod_name)


def _load_matchers(filepath: Path) -> list[ExposureMatcher]:
    """Import one extension file and instantiate the matchers it defines.

    A file that fails to import contributes nothing; the failure is reported
    on stderr and loading carries on with the next file.
    """
    if str(filepath.parent) not in sys.path:
        sys.path.insert(0, str(filepath.parent))
    mod_name = f"kube2swarm_ext_{filepath.stem}"
    spec = importlib.util.spec_from_file_location(mod_name, filepath)
    if spec is None or spec.loader is None:
        return []
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as exc:  # pylint: disable=broad-except
        print(f"Warning: failed to load {filepath}: {exc}", file=sys.stderr)
        return []
    return [obj() for obj in vars(module).values() if _is_matcher_class(obj, mod_name)]


def load_extensions(extensions_dir) -> list[ExposureMatcher]:
    """Load matcher classes from an extensions directory, sorted by priority."""
    matchers = []
    for filepath in _extension_files(extensions_dir):
        matchers.extend(_load_matchers(filepath))
    matchers.sort(key=lambda m: getattr(m, 'priority', 1000))
    if matchers:
        loaded = ", ".join(f"{type(m).__name__} ({m.name})" for m in matchers)
        print(f"Loaded matchers: {loaded}", file=sys.stderr)
    return matchers


def build_registry(extra_matchers=None) -> dict[str, ExposureMatcher]:
    """Map matcher names to instances; extensions override built-ins by name."""
    registry = {cls.name: cls() for cls in BUILTIN_MATCHERS}
    for matcher in extra_matchers or []:
        if matcher.name in registry:
            print(f"Matcher overrides built-in: {matcher.name}", file=sys.stderr)
        registry[matcher.name] = matcher
    return registry


def select_matcher(registry: dict[str, ExposureMatcher], name: str) -> ExposureMatcher:
    """Pick a matcher by name."""
    try:
        return registry[name]
    except KeyError:
        known = ", ".join(sorted(registry))
        raise ConfigError(f"unknown matcher '{name}' (known: {known})") from None
