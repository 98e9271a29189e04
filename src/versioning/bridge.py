"""Interpreter Bridge: evaluate a Ruby fragment in a short-lived subprocess.

The fragment becomes the body of ``data(input)``; ``input`` is the JSON value
read from stdin. The subprocess prints exactly one JSON line of the form
``{"error": <string|null>, "data": <any|null>}``.
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Any, Optional

from constants import Constants
from common.logging_utils import Timer, extra_context, is_debug_enabled, truncate

from .errors import BridgeIOFailure, BridgeLogicFailure, BridgeTimeout
from .models import BridgeRequest, BridgeResponse

logger = logging.getLogger(__name__)

_WRAPPER = """
begin
  def data(input)
%s
  end
  input = JSON.parse(STDIN.read)
  out = data(input)
  puts({error: nil, data: out}.to_json)
rescue => e
  puts({error: e.to_s, data: nil}.to_json)
end
"""


def quote_ruby(value: str) -> str:
    """Escape ``value`` for use inside a single-quoted Ruby string."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def wrap_fragment(code: str) -> str:
    """Return the full Ruby script that evaluates ``code`` against stdin."""
    return _WRAPPER % code


def decode_response(stdout: str) -> BridgeResponse:
    """Parse the last non-empty stdout line as the bridge response.

    Bundler may print notices ahead of the payload, so earlier lines are ignored.
    """
    lines = [line for line in stdout.splitlines() if line.strip()]
    if not lines:
        raise BridgeIOFailure("Empty response from ruby", stdout=stdout)
    try:
        payload = json.loads(lines[-1])
    except json.JSONDecodeError as e:
        raise BridgeIOFailure(f"Unparsable response from ruby: {e}", stdout=stdout) from e
    return BridgeResponse.from_payload(payload)


class RubyBridge:
    """Runs Ruby fragments through ``ruby -rjson -rbundler -e``.

    Holds no state between calls; the binary and timeout are read from
    Constants at construction unless given explicitly.
    """

    def __init__(self, ruby_binary: Optional[str] = None, timeout: Optional[float] = None):
        self.ruby_binary = ruby_binary or Constants.RUBY_BINARY
        self.timeout = timeout if timeout is not None else Constants.BRIDGE_TIMEOUT_SEC

    def command(self, code: str) -> list:
        return [self.ruby_binary, "-rjson", "-rbundler", "-e", wrap_fragment(code)]

    def evaluate(self, directory: str, code: str, data: Any = None) -> Any:
        """Evaluate ``code`` in ``directory`` with ``data`` as its input.

        Args:
            directory: Working directory for the subprocess.
            code: Ruby fragment; its last expression is the result.
            data: JSON-serializable input value.

        Returns:
            The decoded ``data`` field of the response.

        Raises:
            BridgeIOFailure: ruby could not run, exited non-zero, or printed garbage.
            BridgeTimeout: ruby did not finish within ``self.timeout`` seconds.
            BridgeLogicFailure: the fragment raised; carries ruby's message.
        """
        return self.run(BridgeRequest(directory=directory, code=code, data=data))

    def run(self, request: BridgeRequest) -> Any:
        try:
            payload = json.dumps(request.data)
        except (TypeError, ValueError) as e:
            raise BridgeIOFailure(f"Cannot serialize bridge input: {e}") from e

        if is_debug_enabled(logger):
            logger.debug(
                "Ruby bridge request",
                extra=extra_context(
                    event="bridge_request",
                    component="bridge",
                    directory=request.directory,
                    code=truncate(request.code),
                ),
            )

        with Timer() as timer:
            try:
                proc = subprocess.run(  # noqa: S603
                    self.command(request.code),
                    cwd=request.directory,
                    input=payload,
                    stdout=subprocess.PIPE,  # stderr is inherited for diagnostics
                    text=True,
                    timeout=self.timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired as e:
                logger.error(
                    "Ruby bridge timed out",
                    extra=extra_context(event="bridge_timeout", outcome="timeout", timeout=self.timeout),
                )
                raise BridgeTimeout(self.timeout) from e
            except OSError as e:
                raise BridgeIOFailure(f"Unable to run {self.ruby_binary}: {e}") from e

        if proc.returncode != 0:
            logger.error(
                "Ruby bridge exited non-zero",
                extra=extra_context(
                    event="bridge_response",
                    outcome="exit_status",
                    returncode=proc.returncode,
                    duration_ms=timer.duration_ms(),
                ),
            )
            raise BridgeIOFailure(
                f"{self.ruby_binary} exited with status {proc.returncode}",
                returncode=proc.returncode,
                stdout=proc.stdout or "",
            )

        response = decode_response(proc.stdout or "")

        if is_debug_enabled(logger):
            logger.debug(
                "Ruby bridge response",
                extra=extra_context(
                    event="bridge_response",
                    outcome="error" if response.failed else "success",
                    duration_ms=timer.duration_ms(),
                ),
            )

        if response.failed:
            raise BridgeLogicFailure(response.error)
        return response.data
