"""Data models for Ruby version and gem resolution."""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from constants import Constants

from .errors import BridgeIOFailure


@dataclass(frozen=True)
class Manifest:
    """A Gemfile and its lock artifact, rooted at the build directory."""
    build_dir: str
    gemfile: str = Constants.DEFAULT_GEMFILE

    def __post_init__(self):
        # ruby runs with cwd set to the Gemfile directory, so paths handed to
        # it must not be relative to ours.
        object.__setattr__(self, "build_dir", os.path.abspath(self.build_dir))

    @classmethod
    def from_environment(cls, build_dir: str, environ: Optional[Mapping[str, str]] = None) -> "Manifest":
        """Honour BUNDLE_GEMFILE the way Bundler does; default to ./Gemfile."""
        env = os.environ if environ is None else environ
        override = (env.get(Constants.ENV_BUNDLE_GEMFILE) or "").strip()
        return cls(build_dir=build_dir, gemfile=override or Constants.DEFAULT_GEMFILE)

    @property
    def gemfile_path(self) -> str:
        """Absolute-or-build-relative path of the Gemfile."""
        return os.path.join(self.build_dir, self.gemfile)

    @property
    def lockfile_path(self) -> str:
        """gems.rb locks to gems.locked; every other Gemfile to <name>.lock."""
        path = self.gemfile_path
        if os.path.basename(path) == "gems.rb":
            return os.path.join(os.path.dirname(path), "gems.locked")
        return f"{path}.lock"

    @property
    def directory(self) -> str:
        """Directory the Gemfile is evaluated in (it may reference siblings)."""
        return os.path.dirname(self.gemfile_path)

    @property
    def gemfile_name(self) -> str:
        return os.path.basename(self.gemfile_path)

    @property
    def lockfile_name(self) -> str:
        return os.path.basename(self.lockfile_path)

    def has_lockfile(self) -> bool:
        return os.path.isfile(self.lockfile_path)


@dataclass(frozen=True)
class ResolvedRuntime:
    """Engine and version chosen for installation."""
    engine: str
    version: str


@dataclass(frozen=True)
class BridgeRequest:
    """Input to the Interpreter Bridge: a Ruby fragment plus a JSON value."""
    directory: str
    code: str
    data: Any = None


@dataclass(frozen=True)
class BridgeResponse:
    """Decoded interpreter reply; exactly one of error/data is meaningful."""
    error: Optional[str]
    data: Any

    @classmethod
    def from_payload(cls, payload: Any) -> "BridgeResponse":
        """Validate the decoded JSON line emitted by the interpreter."""
        if not isinstance(payload, dict) or "error" not in payload or "data" not in payload:
            raise BridgeIOFailure(f"Unexpected response shape from ruby: {payload!r}")
        error = payload["error"]
        if error is not None and not isinstance(error, str):
            error = str(error)
        return cls(error=error or None, data=payload["data"])

    @property
    def failed(self) -> bool:
        return self.error is not None
