"""Superuser privilege check."""

import logging
import os
import sys

from umbrelup.errors import PrivilegeError

logger = logging.getLogger(__name__)


def require_root() -> None:
    """Raise ``PrivilegeError`` unless the effective user is root."""
    if os.geteuid() != 0:
        msg = "This tool must be run as root."
        raise PrivilegeError(msg, hints=(f"Use: sudo {sys.argv[0]}",))
    logger.info("Running as root.")
