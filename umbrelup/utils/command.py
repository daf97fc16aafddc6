"""Run external commands with fail-fast semantics."""

import logging
import subprocess

from umbrelup.errors import CommandError

logger = logging.getLogger(__name__)


def run_command(
    command: list[str],
    *,
    check: bool = True,
    capture_output: bool = False,
    input_data: bytes | None = None,
) -> subprocess.CompletedProcess:
    """Run a command, raising ``CommandError`` on failure.

    Args:
        command: Program and arguments
        check: Raise when the command exits non-zero
        capture_output: Capture stdout and stderr instead of inheriting them
        input_data: Bytes written to the command's stdin

    Returns:
        The completed process. Output is bytes when captured.

    """
    logger.debug("Running: %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            check=False,
            capture_output=capture_output,
            input=input_data,
        )
    except FileNotFoundError as exc:
        if check:
            raise CommandError(command, 127, str(exc)) from exc
        logger.debug("Command not found: %s", command[0])
        return subprocess.CompletedProcess(command, 127, b"", str(exc).encode())

    if check and result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace") if result.stderr else ""
        raise CommandError(command, result.returncode, stderr)

    return result


def command_succeeds(command: list[str]) -> bool:
    """Return True if the command exits zero, without raising."""
    return run_command(command, check=False, capture_output=True).returncode == 0


def command_output(command: list[str]) -> str:
    """Run a command and return its decoded, stripped stdout."""
    result = run_command(command, capture_output=True)
    return result.stdout.decode("utf-8").strip()
