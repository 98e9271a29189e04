"""Constants used in the project."""

import logging
import os
from enum import Enum

logger = logging.getLogger(__name__)


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    RESOLUTION_ERROR = 4
    UNSUPPORTED_ENGINE = 5


class Engines(Enum):
    """Ruby engines a Gemfile may request.

    Args:
        Enum (string): Engine names as Bundler reports them.
    """

    RUBY = "ruby"
    JRUBY = "jruby"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    RUBY_BINARY = "ruby"
    BRIDGE_TIMEOUT_SEC = 60
    DEFAULT_GEMFILE = "Gemfile"
    PRIMARY_ENGINE = Engines.RUBY.value
    ALTERNATE_ENGINE = Engines.JRUBY.value
    SUPPORTED_ENGINES = [Engines.RUBY.value, Engines.JRUBY.value]
    RUNTIME_DEPENDENCY = "ruby"
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    CONFIG_FILE = "rubyresolve.yml"

    ENV_CONFIG = "RUBYRESOLVE_CONFIG"
    ENV_RUBY_BINARY = "RUBYRESOLVE_RUBY_BINARY"
    ENV_BRIDGE_TIMEOUT = "RUBYRESOLVE_BRIDGE_TIMEOUT"
    ENV_LOG_LEVEL = "RUBYRESOLVE_LOG_LEVEL"
    ENV_BUNDLE_GEMFILE = "BUNDLE_GEMFILE"


def _load_yaml_config(path=None):
    """Load the optional YAML config file.

    Looks at ``path``, then ``$RUBYRESOLVE_CONFIG``, then ``./rubyresolve.yml``.

    Returns:
        dict: Parsed config, empty when no file is present.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    candidate = path or os.environ.get(Constants.ENV_CONFIG) or Constants.CONFIG_FILE
    if not os.path.isfile(candidate):
        return {}
    try:
        with open(candidate, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to load config %s: %s", candidate, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not a mapping", candidate)
        return {}
    return data


def _coerce_timeout(value):
    """Return a positive float timeout or None when the value is unusable."""
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return None
    if timeout <= 0:
        return None
    return timeout


def apply_config(path=None, environ=None) -> None:
    """Apply YAML config then environment overrides onto Constants.

    Invalid values are logged and ignored; CLI flags are applied afterwards
    by the entrypoint and take precedence over both.
    """
    env = os.environ if environ is None else environ
    cfg = _load_yaml_config(path)
    bridge = cfg.get("bridge") if isinstance(cfg.get("bridge"), dict) else {}

    sources = [
        (bridge.get("ruby_binary"), bridge.get("timeout"), "config"),
        (env.get(Constants.ENV_RUBY_BINARY), env.get(Constants.ENV_BRIDGE_TIMEOUT), "environment"),
    ]
    for binary, timeout, origin in sources:
        if isinstance(binary, str) and binary.strip():
            Constants.RUBY_BINARY = binary.strip()
        if timeout is not None:
            coerced = _coerce_timeout(timeout)
            if coerced is None:
                logger.warning("Ignoring invalid bridge timeout from %s: %r", origin, timeout)
            else:
                Constants.BRIDGE_TIMEOUT_SEC = coerced
