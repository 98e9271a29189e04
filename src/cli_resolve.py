"""Runtime selection and report building on top of :class:`versioning.Versions`.

Kept separate from rubyresolve.py so the staging orchestration can reuse the
same engine classification without the CLI.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Tuple

from constants import Constants

from versioning.errors import UnsupportedEngine
from versioning.models import ResolvedRuntime

logger = logging.getLogger(__name__)


def resolve_runtime(versions) -> ResolvedRuntime:
    """Pick the engine and the version to install for it.

    ``ruby`` uses the constrained/default Ruby version; ``jruby`` uses its own
    pinned engine version. Any other engine is unsupported.
    """
    engine = versions.engine()
    if engine == Constants.PRIMARY_ENGINE:
        version = versions.version()
    elif engine == Constants.ALTERNATE_ENGINE:
        version = versions.variant_version()
    else:
        logger.error("Sorry, we do not support engine: %s", engine)
        raise UnsupportedEngine(engine)
    logger.info("Using %s %s", engine, version)
    return ResolvedRuntime(engine=engine, version=version)


def build_report(versions, gems: Iterable[str] = (),
                 checks: Iterable[Tuple[str, List[str]]] = ()) -> Dict[str, Any]:
    """Collect runtime and gem facts into a JSON-serializable mapping."""
    runtime = resolve_runtime(versions)
    report: Dict[str, Any] = {
        "engine": runtime.engine,
        "version": runtime.version,
        "gemfile": versions.manifest.gemfile_path,
        "gems": {},
        "checks": [],
    }
    for name in gems:
        present = versions.has_gem(name)
        report["gems"][name] = {
            "present": present,
            "version": versions.gem_version(name) if present else None,
            "major_version": versions.gem_major_version(name),
        }
    for name, constraints in checks:
        report["checks"].append({
            "gem": name,
            "constraints": list(constraints),
            "satisfied": versions.has_gem_version(name, *constraints),
        })
    return report
