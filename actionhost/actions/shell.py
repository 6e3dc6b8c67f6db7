"""Shell command runner exposed to actions as ``ctx.shell``."""

import asyncio
import logging
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_SAFE_ARG = re.compile(r"^[A-Za-z0-9_\-./]+$")


@dataclass(frozen=True)
class ShellResult:
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def escape_shell_arg(arg: Any) -> str:
    text = str(arg)
    if _SAFE_ARG.match(text):
        return text
    return shlex.quote(text)


def build_command(command: str, *args: Any) -> str:
    """Fill ``{}`` placeholders with shell-escaped ``args``.

    Without placeholders the escaped args are appended.
    """
    escaped = [escape_shell_arg(arg) for arg in args]
    parts = command.split("{}")
    if escaped and len(parts) > 1:
        if len(parts) - 1 != len(escaped):
            raise ValueError(
                f"Command has {len(parts) - 1} placeholder(s) but {len(escaped)} argument(s)"
            )
        pieces = [parts[0]]
        for arg, part in zip(escaped, parts[1:]):
            pieces.extend([arg, part])
        return "".join(pieces)
    return " ".join([command, *escaped]) if escaped else command


class ShellExecutor:
    """Runs commands through ``/bin/sh``; a non-zero exit is a result, not an error."""

    def __init__(self, cwd: Optional[Path] = None, env: Optional[Dict[str, str]] = None):
        self.cwd = cwd
        self.env = env

    async def __call__(self, command: str, *args: Any) -> ShellResult:
        command_string = build_command(command, *args)
        logger.debug(f"Executing shell command: {command_string}")

        try:
            process = await asyncio.create_subprocess_shell(
                command_string,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd else None,
                env=self.env,
            )
        except OSError as e:
            logger.error(f"Failed to run command: {e}")
            return ShellResult(stdout="", stderr=str(e), exit_code=127)

        stdout, stderr = await process.communicate()
        result = ShellResult(
            stdout=stdout.decode("utf-8", errors="replace").rstrip(),
            stderr=stderr.decode("utf-8", errors="replace").rstrip(),
            exit_code=process.returncode if process.returncode is not None else 0,
        )

        if result.ok:
            logger.debug("Command completed successfully")
        else:
            logger.debug(f"Command failed with exit code {result.exit_code}: {result.stderr}")
        return result
