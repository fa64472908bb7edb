"""
Gateway transport backed by the ``openclaw`` command-line binary.

Only two gateway methods make sense locally:
- ``tools.list``: the CLI has no dynamic catalog, so this is a fixed empty list
- ``chat.send``: one ``openclaw agent ... --json`` subprocess per message

Subprocesses are bounded by a wall clock timeout and a stdout size cap;
breaching either kills the child and raises CliError.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from openclaw_mcp.config import (
    CLI_AGENT_TIMEOUT,
    CLI_SESSION_KEY,
    DEFAULT_CLI_BIN,
    DEFAULT_CLI_TIMEOUT,
    LOGGER_NAME,
    MAX_CLI_OUTPUT,
    PRODUCT_TAG,
)
from openclaw_mcp.types import CliError

logger = logging.getLogger(LOGGER_NAME)

NO_RESPONSE = "(no response)"
_READ_CHUNK = 64 * 1024


# =============================================================================
# CLI Output Model
# =============================================================================


class CliPayload(BaseModel):
    text: str | None = None


class CliResult(BaseModel):
    payloads: list[CliPayload] | None = None


class CliResponse(BaseModel):
    """JSON document printed by ``openclaw agent --json``."""

    result: CliResult | None = None
    error: str | None = None


# =============================================================================
# Subprocess Runner
# =============================================================================


@dataclass(slots=True)
class CliOutput:
    stdout: str
    stderr: str


async def _read_bounded(stream: asyncio.StreamReader, limit: int) -> bytes:
    chunks: list[bytes] = []
    size = 0
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise CliError(f"Output exceeded {limit} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


async def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()


async def run_cli(
    bin: str,
    args: Sequence[str],
    *,
    timeout: float = DEFAULT_CLI_TIMEOUT,
    max_buffer: int = MAX_CLI_OUTPUT,
) -> CliOutput:
    """
    Run ``bin`` with ``args`` and capture its output.

    Raises CliError on spawn failure, non-zero exit, timeout or oversized
    output. The error keeps the original message and any captured stderr.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            bin,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise CliError(str(e), details={"bin": bin}) from e

    async def communicate() -> tuple[bytes, bytes, int]:
        out, err = await asyncio.gather(
            _read_bounded(proc.stdout, max_buffer),
            _read_bounded(proc.stderr, max_buffer),
        )
        return out, err, await proc.wait()

    try:
        stdout, stderr, returncode = await asyncio.wait_for(communicate(), timeout)
    except asyncio.TimeoutError:
        await _kill(proc)
        raise CliError(f"Command timed out after {timeout}s: {bin}", details={"bin": bin}) from None
    except CliError:
        await _kill(proc)
        raise

    stderr_text = stderr.decode("utf-8", errors="replace")
    if returncode != 0:
        message = f"Command failed with exit code {returncode}: {bin}"
        if stderr_text.strip():
            message = f"{message}\n{stderr_text.strip()}"
        raise CliError(message, stderr=stderr_text, details={"bin": bin, "returncode": returncode})

    return CliOutput(stdout=stdout.decode("utf-8", errors="replace"), stderr=stderr_text)


# =============================================================================
# Transport
# =============================================================================


class CliTransport:
    """GatewayTransport that shells out to the OpenClaw binary."""

    def __init__(self, bin: str = DEFAULT_CLI_BIN, timeout: float = DEFAULT_CLI_TIMEOUT):
        self.bin = bin
        self.timeout = timeout

    async def request(
        self,
        method: str,
        params: Mapping[str, Any] | None = None,
        *,
        expect_final: bool = False,
    ) -> dict[str, Any]:
        if method == "chat.send":
            return await self._chat_send(params or {})

        if method == "tools.list":
            return {"tools": [], "sessionKey": CLI_SESSION_KEY}

        raise CliError(f"Unsupported method: {method}")

    def build_args(self, message: str, session_key: str | None = None) -> list[str]:
        args = [
            "agent",
            "--agent", "main",
            "--message", message,
            "--json",
            "--timeout", str(CLI_AGENT_TIMEOUT),
        ]
        if session_key:
            args.extend(["--session-id", session_key])
        return args

    async def _chat_send(self, params: Mapping[str, Any]) -> dict[str, Any]:
        message = params.get("message")
        if not message:
            raise CliError("message is required")

        args = self.build_args(message, params.get("sessionKey"))
        logger.debug("▶️ %s %s", self.bin, " ".join(args[:2]))
        output = await run_cli(self.bin, args, timeout=self.timeout, max_buffer=MAX_CLI_OUTPUT)

        try:
            parsed = CliResponse.model_validate_json(output.stdout)
        except ValidationError as e:
            raise CliError(f"Invalid output from {self.bin}: {e}", stderr=output.stderr) from e

        if parsed.error:
            raise CliError(f"{PRODUCT_TAG}: {parsed.error}", stderr=output.stderr)

        payloads = (parsed.result.payloads if parsed.result else None) or []
        text = payloads[0].text if payloads else None
        if text is None:
            text = NO_RESPONSE
        return {"message": {"content": [{"type": "text", "text": text}]}}


__all__ = ["CliOutput", "CliResponse", "CliTransport", "run_cli"]
