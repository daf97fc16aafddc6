"""Module for determining the host's package manager."""

import logging
import shutil

from umbrelup.models import PackageManager

logger = logging.getLogger(__name__)

# Probed in this order, the first one found wins
SUPPORTED_PACKAGE_MANAGERS = (
    PackageManager(name="dnf", binary="dnf", description="Fedora/RHEL/CentOS"),
    PackageManager(name="pacman", binary="pacman", description="Arch Linux"),
    PackageManager(name="apt", binary="apt-get", description="Debian/Ubuntu"),
)


def detect_package_manager() -> PackageManager | None:
    """Detect the package manager available on this host.

    Returns:
        PackageManager: The first supported manager found on PATH
        None: If no supported package manager is found

    """
    for pkg_manager in SUPPORTED_PACKAGE_MANAGERS:
        if path := shutil.which(pkg_manager.binary):
            logger.debug("Found package manager: %s at %s", pkg_manager.name, path)
            return pkg_manager

    logger.debug("No supported package manager found")
    return None
