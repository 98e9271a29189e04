"""Shared fixtures for rubyresolve tests."""

import os
import shutil
import subprocess

import pytest

from constants import Constants

RODA_LOCKFILE = """GEM
  remote: https://rubygems.org/
  specs:
    rack (2.0.3)
    roda (2.28.0)
      rack

PLATFORMS
  ruby

DEPENDENCIES
  roda

BUNDLED WITH
   1.15.3
"""


class FakeBridge:
    """Stands in for RubyBridge; answers through ``handler`` and records calls."""

    def __init__(self, handler=None, result=None):
        self.handler = handler
        self.result = result
        self.calls = []

    def evaluate(self, directory, code, data=None):
        self.calls.append((directory, code, data))
        if self.handler is not None:
            return self.handler(directory, code, data)
        return self.result


def ruby_with_bundler_available():
    """True when a ruby that can require bundler is on PATH."""
    if shutil.which("ruby") is None:
        return False
    try:
        proc = subprocess.run(
            ["ruby", "-rjson", "-rbundler", "-e", "exit 0"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=30,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired):
        return False
    return proc.returncode == 0


@pytest.fixture(autouse=True)
def isolate_constants(monkeypatch):
    """Keep Constants overrides and bundler env from leaking between tests."""
    monkeypatch.setattr(Constants, "RUBY_BINARY", Constants.RUBY_BINARY)
    monkeypatch.setattr(Constants, "BRIDGE_TIMEOUT_SEC", Constants.BRIDGE_TIMEOUT_SEC)
    monkeypatch.delenv(Constants.ENV_BUNDLE_GEMFILE, raising=False)
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    monkeypatch.delenv(Constants.ENV_RUBY_BINARY, raising=False)
    monkeypatch.delenv(Constants.ENV_BRIDGE_TIMEOUT, raising=False)


@pytest.fixture
def app_dir(tmp_path):
    """Build directory with a Gemfile using roda and its lockfile."""
    (tmp_path / "Gemfile").write_text("source 'https://rubygems.org'\ngem 'roda'\n")
    (tmp_path / "Gemfile.lock").write_text(RODA_LOCKFILE)
    return str(tmp_path)


@pytest.fixture
def fake_bridge():
    return FakeBridge()


@pytest.fixture
def fixtures_dir():
    return os.path.join(os.path.dirname(__file__), "fixtures")
