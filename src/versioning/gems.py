"""Gem presence and version queries over the lockfile spec table."""

from __future__ import annotations

import logging

from .errors import BridgeIOFailure, PackageNotFound
from .specs import SpecTable

logger = logging.getLogger(__name__)

SATISFIES_CODE = """
    gem_version = input.shift
    Gem::Requirement.create(input).satisfied_by? Gem::Version.new(gem_version)
"""

MAJOR_VERSION_CODE = "Gem::Version.new(input.first).segments.first.to_s"


class GemQuery:
    """Presence, version and requirement checks for locked gems.

    Absence is a valid answer for every query except :meth:`gem_version`:
    ``has_gem`` and ``has_gem_version`` return False and
    ``gem_major_version`` returns -1.
    """

    def __init__(self, specs: SpecTable, bridge):
        self.specs = specs
        self.bridge = bridge

    @property
    def directory(self) -> str:
        return self.specs.manifest.directory

    def has_gem(self, name: str) -> bool:
        return name in self.specs

    def gem_version(self, name: str) -> str:
        version = self.specs.get(name)
        if version is None:
            raise PackageNotFound(name)
        return version

    def gem_major_version(self, name: str) -> int:
        version = self.specs.get(name)
        if version is None:
            return -1
        data = self.bridge.evaluate(self.directory, MAJOR_VERSION_CODE, [version])
        try:
            return int(data)
        except (TypeError, ValueError) as e:
            raise BridgeIOFailure(f"Non-numeric major version for {name}: {data!r}") from e

    def has_gem_version(self, name: str, *constraints: str) -> bool:
        """True when the locked version of ``name`` satisfies every constraint."""
        version = self.specs.get(name)
        if version is None:
            return False
        data = self.bridge.evaluate(self.directory, SATISFIES_CODE, [version, *constraints])
        if not isinstance(data, bool):
            raise BridgeIOFailure(f"Expected a boolean from requirement check, got {data!r}")
        return data
