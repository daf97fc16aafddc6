"""Parser for the freedesktop ``os-release`` file."""

import logging
import shlex
from pathlib import Path

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")


def parse_os_release(path: Path = OS_RELEASE_PATH) -> dict[str, str]:
    """Parse ``KEY=value`` pairs from an os-release file.

    Values may be quoted with shell quoting rules. Comments and blank lines
    are ignored.

    Example:
        >>> parse_os_release(Path("/etc/os-release"))["ID"]
        'ubuntu'

    """
    values = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        try:
            tokens = shlex.split(raw_value)
        except ValueError:
            logger.debug("Skipping malformed os-release line: %s", line)
            continue
        values[key.strip()] = tokens[0] if tokens else ""
    return values
