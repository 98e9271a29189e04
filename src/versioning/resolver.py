"""Ruby version constraint resolution against an installable catalog."""

from __future__ import annotations

import logging
from typing import List

from common.logging_utils import extra_context

from .bridge import quote_ruby
from .errors import BridgeIOFailure, NoMatchingVersion
from .models import Manifest

logger = logging.getLogger(__name__)

# Returns nil when the Gemfile has no `ruby` directive. Gem::Version sorting
# ranks a release above any prerelease of the same numbers.
RUBY_VERSION_CODE = """
    b = Bundler::Dsl.evaluate('%(gemfile)s', '%(lockfile)s', {}).ruby_version
    return nil if !b

    r = Gem::Requirement.create(b.versions)
    version = input.select { |v| r.satisfied_by? Gem::Version.new(v) }.max_by { |v| Gem::Version.new(v) }
    { "requirement" => r.to_s, "version" => version }
"""


class ConstraintResolver:
    """Picks the greatest catalog version satisfying the Gemfile's ruby directive.

    Falling back to a default version when the Gemfile is unconstrained is the
    caller's job; here an unconstrained Gemfile yields ``""``.
    """

    def __init__(self, bridge):
        self.bridge = bridge

    def resolve_version(self, catalog: List[str], manifest: Manifest) -> str:
        code = RUBY_VERSION_CODE % {
            "gemfile": quote_ruby(manifest.gemfile_name),
            "lockfile": quote_ruby(manifest.lockfile_name),
        }
        data = self.bridge.evaluate(manifest.directory, code, list(catalog))
        if data is None:
            logger.debug(
                "Gemfile declares no ruby version",
                extra=extra_context(event="ruby_version", outcome="unconstrained"),
            )
            return ""
        if not isinstance(data, dict):
            raise BridgeIOFailure(f"Expected a resolution mapping, got {type(data).__name__}")

        requirement = str(data.get("requirement") or "")
        version = data.get("version")
        if not version:
            raise NoMatchingVersion(requirement, len(catalog))

        logger.debug(
            "Resolved ruby version",
            extra=extra_context(
                event="ruby_version",
                outcome="resolved",
                requirement=requirement,
                resolved_version=version,
                candidate_count=len(catalog),
            ),
        )
        return str(version)
