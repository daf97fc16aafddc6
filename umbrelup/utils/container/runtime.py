"""Detects whether the Docker runtime binary is installed."""

import logging
import shutil

logger = logging.getLogger(__name__)

RUNTIME_BINARY = "docker"


def detect_container_runtime() -> str | None:
    """Detect the Docker CLI on PATH.

    Returns:
        str: Path to the container runtime binary
        None: If the runtime is not installed

    """
    if path := shutil.which(RUNTIME_BINARY):
        logger.debug("Found container runtime: %s at %s", RUNTIME_BINARY, path)
        return path

    logger.debug("No container runtime found")
    return None
