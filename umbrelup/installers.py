"""Install the Docker engine with the host's package manager."""

import logging
from collections.abc import Callable
from pathlib import Path

from umbrelup.errors import InstallError, UnsupportedPackageManagerError
from umbrelup.models import DOCKER_INSTALL_DOCS, PackageManager
from umbrelup.service import start_and_enable
from umbrelup.utils.command import command_output, run_command
from umbrelup.utils.container.runtime import detect_container_runtime
from umbrelup.utils.parsers.os_release import parse_os_release
from umbrelup.utils.parsers.package_manager import detect_package_manager

logger = logging.getLogger(__name__)

DOCKER_PACKAGES = (
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
)
APT_CONFLICTING_PACKAGES = (
    "docker.io",
    "docker-doc",
    "docker-compose",
    "podman-docker",
    "containerd",
    "runc",
)
DNF_REPO_URL = "https://download.docker.com/linux/fedora/docker-ce.repo"
APT_DOWNLOAD_URL = "https://download.docker.com/linux"
APT_KEYRING_DIR = Path("/etc/apt/keyrings")
APT_KEYRING = APT_KEYRING_DIR / "docker.gpg"
APT_SOURCES_LIST = Path("/etc/apt/sources.list.d/docker.list")


def install_docker_dnf() -> None:
    """Install Docker Engine with DNF (Fedora, CentOS Stream, RHEL)."""
    logger.info("Installing Docker Engine with DNF...")
    run_command(["dnf", "install", "-y", "dnf-plugins-core"])
    run_command(["dnf", "config-manager", "--add-repo", DNF_REPO_URL])
    run_command(["dnf", "install", "-y", *DOCKER_PACKAGES])
    start_and_enable()
    logger.info("Docker installed and configured with DNF.")


def install_docker_pacman() -> None:
    """Install Docker with Pacman (Arch Linux)."""
    logger.info("Installing Docker with Pacman...")
    run_command(["pacman", "-Syu", "--noconfirm", "--needed", "docker", "docker-compose"])
    start_and_enable()
    logger.info("Docker installed and configured with Pacman.")


def _apt_codename(os_release: dict[str, str]) -> str:
    """Release codename, preferring ``lsb_release`` like Docker's own docs."""
    result = run_command(["lsb_release", "-cs"], check=False, capture_output=True)
    if result.returncode == 0 and result.stdout.strip():
        return result.stdout.decode("utf-8").strip()

    codename = os_release.get("VERSION_CODENAME")
    if not codename:
        msg = "Could not determine the distribution codename."
        raise InstallError(msg, hints=(f"Install Docker manually: {DOCKER_INSTALL_DOCS}",))
    logger.debug("lsb_release unavailable, using VERSION_CODENAME=%s", codename)
    return codename


def _add_apt_repository() -> None:
    """Register Docker's signing key and apt source."""
    os_release = parse_os_release()
    distro = os_release.get("ID", "")
    if not distro:
        msg = "Could not determine the distribution ID from os-release."
        raise InstallError(msg, hints=(f"Install Docker manually: {DOCKER_INSTALL_DOCS}",))

    repo_url = f"{APT_DOWNLOAD_URL}/{distro}"

    run_command(["install", "-m", "0755", "-d", str(APT_KEYRING_DIR)])
    key = run_command(["curl", "-fsSL", f"{repo_url}/gpg"], capture_output=True).stdout
    run_command(
        ["gpg", "--batch", "--yes", "--dearmor", "-o", str(APT_KEYRING)],
        input_data=key,
    )
    run_command(["chmod", "a+r", str(APT_KEYRING)])

    arch = command_output(["dpkg", "--print-architecture"])
    codename = _apt_codename(os_release)
    source = f"deb [arch={arch} signed-by={APT_KEYRING}] {repo_url} {codename} stable\n"
    APT_SOURCES_LIST.write_text(source)
    logger.info("Added Docker apt source: %s", source.strip())


def install_docker_apt() -> None:
    """Install Docker Engine with APT (Debian, Ubuntu)."""
    logger.info("Installing Docker Engine with APT...")
    for pkg in APT_CONFLICTING_PACKAGES:
        # Packages that are not installed make apt-get fail, which is fine here
        run_command(["apt-get", "remove", "-y", pkg], check=False, capture_output=True)
    run_command(["apt-get", "update", "-y"])
    run_command(["apt-get", "install", "-y", "ca-certificates", "curl", "gnupg"])
    _add_apt_repository()
    run_command(["apt-get", "update", "-y"])
    run_command(["apt-get", "install", "-y", *DOCKER_PACKAGES])
    start_and_enable()
    logger.info("Docker installed and configured with APT.")


INSTALLERS: dict[str, Callable[[], None]] = {
    "dnf": install_docker_dnf,
    "pacman": install_docker_pacman,
    "apt": install_docker_apt,
}


def install_docker(pkg_manager: PackageManager | None) -> None:
    """Run the install sequence for ``pkg_manager``.

    Args:
        pkg_manager: The detected package manager, or None if none was found

    Raises:
        UnsupportedPackageManagerError: If ``pkg_manager`` is None or unknown
        InstallError: If the runtime is still missing afterwards

    """
    if pkg_manager is None or pkg_manager.name not in INSTALLERS:
        msg = "No supported package manager (dnf, pacman, apt) was detected."
        raise UnsupportedPackageManagerError(
            msg,
            hints=(
                "Please install Docker manually for your operating system.",
                f"Instructions: {DOCKER_INSTALL_DOCS}",
            ),
        )

    logger.info(
        "Detected package manager %s (%s).",
        pkg_manager.name.upper(),
        pkg_manager.description,
    )
    INSTALLERS[pkg_manager.name]()

    if detect_container_runtime() is None:
        msg = "Docker is still missing after installation. Check the output above."
        raise InstallError(
            msg,
            hints=(f"Consider installing it manually: {DOCKER_INSTALL_DOCS}",),
        )
    logger.info("Docker installed successfully.")


def ensure_docker_installed() -> bool:
    """Install Docker unless it is already on PATH.

    Returns:
        bool: True if an install was performed, False if Docker was present

    """
    if detect_container_runtime() is not None:
        logger.info("Docker is already installed.")
        return False

    logger.info("Docker not found. Trying to install it...")
    install_docker(detect_package_manager())
    return True
