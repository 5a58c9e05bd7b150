"""Command runner for external tool invocations."""

import logging
import subprocess
from pathlib import Path

from pydantic import BaseModel, Field

from ..constants import STDERR_EXCERPT_CHARS
from ..errors import CommandFailed

logger = logging.getLogger(__name__)


class CommandResult(BaseModel):
    """Exit status and captured output of a finished command."""

    exit_code: int = Field(description="Process exit code")
    stdout: str = Field(default="", description="Captured stdout (empty when interactive)")
    stderr: str = Field(default="", description="Captured stderr (empty when interactive)")


def _excerpt(text: str) -> str:
    text = text.strip()
    if len(text) > STDERR_EXCERPT_CHARS:
        return "..." + text[-STDERR_EXCERPT_CHARS:]
    return text


def run_command(
    executable: str,
    args: list[str] | tuple[str, ...] = (),
    cwd: Path | None = None,
    interactive: bool = False,
) -> CommandResult:
    """Run an external command and wait for it to exit.

    Args:
        executable: Program to run
        args: Arguments passed to the program
        cwd: Working directory
        interactive: Connect the invoking terminal instead of capturing output

    Returns:
        CommandResult for a zero exit

    Raises:
        CommandFailed: If the program cannot be started or exits non-zero
    """
    cmd = [executable, *args]
    logger.debug(f"Running: {' '.join(cmd)} (cwd={cwd or '.'})")

    try:
        if interactive:
            result = subprocess.run(cmd, cwd=cwd)
        else:
            result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError:
        raise CommandFailed(executable, 127, "command not found") from None
    except PermissionError as e:
        raise CommandFailed(executable, 126, str(e)) from None

    stdout = "" if interactive else (result.stdout or "")
    stderr = "" if interactive else (result.stderr or "")
    if stdout.strip():
        logger.debug(f"{executable} stdout:\n{stdout.rstrip()}")
    if stderr.strip():
        logger.debug(f"{executable} stderr:\n{stderr.rstrip()}")

    if result.returncode != 0:
        raise CommandFailed(executable, result.returncode, _excerpt(stderr or stdout))

    return CommandResult(exit_code=result.returncode, stdout=stdout, stderr=stderr)
