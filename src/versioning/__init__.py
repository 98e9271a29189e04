"""Ruby version, engine and gem resolution for application staging."""

from .bridge import RubyBridge
from .errors import (
    BridgeError,
    BridgeIOFailure,
    BridgeLogicFailure,
    BridgeTimeout,
    MissingLockfile,
    MissingVariantVersion,
    NoMatchingVersion,
    PackageNotFound,
    ResolutionError,
    UnsupportedEngine,
)
from .models import Manifest, ResolvedRuntime
from .service import Versions

__all__ = [
    "RubyBridge",
    "Versions",
    "Manifest",
    "ResolvedRuntime",
    "ResolutionError",
    "BridgeError",
    "BridgeIOFailure",
    "BridgeLogicFailure",
    "BridgeTimeout",
    "NoMatchingVersion",
    "PackageNotFound",
    "MissingVariantVersion",
    "MissingLockfile",
    "UnsupportedEngine",
]
