"""Buildpack manifest.yml: the catalog of installable runtime versions.

The manifest lists every packaged dependency and, per dependency name, an
optional default version which may be a wildcard such as ``2.4.x``.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import semantic_version
import yaml

from common.logging_utils import extra_context
from versioning.errors import NoMatchingVersion, ResolutionError

logger = logging.getLogger(__name__)

_EXTRA_SEGMENTS = re.compile(r"^\d+\.\d+\.\d+((?:\.\d+)+)")


class ManifestError(ResolutionError):
    """manifest.yml is missing, unreadable, or inconsistent."""


class NoDefaultVersion(ManifestError):
    """manifest.yml declares no default version for a dependency."""

    def __init__(self, name: str):
        super().__init__(f"no default version for {name}")
        self.name = name


@dataclass
class Dependency:
    """A packaged dependency entry."""
    name: str
    version: str
    uri: str = ""
    sha256: str = ""
    cf_stacks: List[str] = field(default_factory=list)


def _coerce(version: str) -> Optional[semantic_version.Version]:
    try:
        return semantic_version.Version.coerce(version)
    except ValueError:
        return None


def version_sort_key(version: str) -> Tuple[Any, ...]:
    """Sort key ordering versions semantically; 4-segment versions included.

    ``semantic_version`` folds segments past the patch level into build
    metadata, which carries no precedence, so they are compared separately.
    Unparsable versions sort first, by their raw text.
    """
    parsed = _coerce(version)
    if parsed is None:
        return (0, semantic_version.Version("0.0.0"), (), version)
    m = _EXTRA_SEGMENTS.match(version)
    extra = tuple(int(p) for p in m.group(1).split(".")[1:]) if m else ()
    return (1, semantic_version.Version(major=parsed.major, minor=parsed.minor, patch=parsed.patch,
                                        prerelease=parsed.prerelease), extra, version)


def _parse_spec(constraint: str):
    """Parse a default-version constraint (``2.4.x``, ``~2.4``, ``>=2.3``)."""
    try:
        return semantic_version.NpmSpec(constraint)
    except ValueError:
        try:
            return semantic_version.SimpleSpec(constraint)
        except ValueError:
            return None


def find_matching_version(constraint: str, versions: List[str]) -> Optional[str]:
    """Return the highest of ``versions`` matching ``constraint`` or None."""
    if constraint in versions:
        return constraint
    spec = _parse_spec(constraint)
    if spec is None:
        return None
    matches = []
    for v in versions:
        parsed = _coerce(v)
        if parsed is not None and spec.match(parsed):
            matches.append(v)
    if not matches:
        return None
    return max(matches, key=version_sort_key)


class BuildpackManifest:
    """Reads dependency and default-version entries from manifest.yml.

    Implements the catalog interface consumed by :class:`versioning.Versions`.
    """

    def __init__(self, data: Dict[str, Any], path: str = "<memory>"):
        self.path = path
        self.language = data.get("language", "")
        self.dependencies = [self._dependency(entry) for entry in data.get("dependencies") or []]
        self.default_versions = [self._dependency(entry) for entry in data.get("default_versions") or []]

    @classmethod
    def load(cls, path: str) -> "BuildpackManifest":
        if os.path.isdir(path):
            path = os.path.join(path, "manifest.yml")
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except FileNotFoundError as e:
            raise ManifestError(f"manifest not found: {path}") from e
        except (OSError, yaml.YAMLError) as e:
            raise ManifestError(f"failed to read manifest {path}: {e}") from e
        if not isinstance(data, dict):
            raise ManifestError(f"manifest {path} is not a mapping")
        manifest = cls(data, path)
        logger.debug(
            "Loaded buildpack manifest",
            extra=extra_context(event="manifest_loaded", path=path, dependency_count=len(manifest.dependencies)),
        )
        return manifest

    def _dependency(self, entry: Any) -> Dependency:
        if not isinstance(entry, dict) or "name" not in entry or "version" not in entry:
            raise ManifestError(f"invalid dependency entry in {self.path}: {entry!r}")
        return Dependency(
            name=str(entry["name"]),
            version=str(entry["version"]),
            uri=str(entry.get("uri") or ""),
            sha256=str(entry.get("sha256") or ""),
            cf_stacks=list(entry.get("cf_stacks") or []),
        )

    def all_dependency_versions(self, name: str) -> List[str]:
        """Distinct versions packaged for ``name``, lowest first."""
        versions = {dep.version for dep in self.dependencies if dep.name == name}
        return sorted(versions, key=version_sort_key)

    def default_version(self, name: str) -> Dependency:
        defaults = [dep for dep in self.default_versions if dep.name == name]
        if not defaults:
            raise NoDefaultVersion(name)
        if len(defaults) > 1:
            raise ManifestError(f"found {len(defaults)} default versions for {name}")

        constraint = defaults[0].version
        versions = self.all_dependency_versions(name)
        version = find_matching_version(constraint, versions)
        if version is None:
            raise NoMatchingVersion(constraint, len(versions), name)
        return Dependency(name=name, version=version)
