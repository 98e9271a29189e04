"""Error kinds raised by the resolution core.

Every failure propagates to the immediate caller; nothing here retries.
"""

from typing import Optional


class ResolutionError(Exception):
    """Base class for all resolution failures."""


class BridgeError(ResolutionError):
    """Base class for Interpreter Bridge failures."""


class BridgeIOFailure(BridgeError):
    """The interpreter could not run or its output was unusable."""

    def __init__(self, message: str, returncode: Optional[int] = None, stdout: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout


class BridgeLogicFailure(BridgeError):
    """The evaluated fragment raised inside the interpreter."""

    def __init__(self, ruby_message: str):
        super().__init__(f"Running ruby: {ruby_message}")
        self.ruby_message = ruby_message


class BridgeTimeout(BridgeError):
    """The interpreter did not answer within the configured wait."""

    def __init__(self, timeout: float):
        super().__init__(f"Running ruby: timed out after {timeout:g}s")
        self.timeout = timeout


class NoMatchingVersion(ResolutionError):
    """A version constraint excluded every catalog entry."""

    def __init__(self, constraint: str, catalog_size: int, name: str = "ruby"):
        super().__init__(
            f"No Matching {name} versions: '{constraint}' matched none of {catalog_size} available"
        )
        self.constraint = constraint
        self.catalog_size = catalog_size
        self.name = name


class PackageNotFound(ResolutionError):
    """The gem is not present in the lockfile."""

    def __init__(self, name: str):
        super().__init__(f"Gem '{name}' not found in lockfile")
        self.name = name


class MissingVariantVersion(ResolutionError):
    """The alternate engine was requested without a pinned engine version."""

    def __init__(self, engine: str):
        super().__init__(f"Gemfile requests engine '{engine}' without an engine_version")
        self.engine = engine


class MissingLockfile(ResolutionError):
    """The lock artifact next to the Gemfile does not exist."""

    def __init__(self, path: str):
        super().__init__(f"gemfile.lock required. please check it in. (looked for {path})")
        self.path = path


class UnsupportedEngine(ResolutionError):
    """Raised by callers when the Gemfile asks for an engine they cannot stage."""

    def __init__(self, engine: str):
        super().__init__(f"Sorry, we do not support engine: {engine}")
        self.engine = engine
