from __future__ import annotations

import pytest

from umbrelup.errors import CommandError, InstallError, UnsupportedPackageManagerError
from umbrelup.installers import DOCKER_PACKAGES, ensure_docker_installed, install_docker
from umbrelup.utils.parsers.package_manager import SUPPORTED_PACKAGE_MANAGERS

DNF, PACMAN, APT = SUPPORTED_PACKAGE_MANAGERS


def test_ensure_docker_installed_should_skip_when_present(host) -> None:
    host.binaries = {"docker", "dnf"}

    assert ensure_docker_installed() is False
    assert host.calls == []


def test_ensure_docker_installed_should_use_first_manager_only(host) -> None:
    host.binaries = {"dnf", "pacman", "apt-get"}

    assert ensure_docker_installed() is True

    assert host.package_manager_calls
    assert all(call[0] == "dnf" for call in host.package_manager_calls)


def test_ensure_docker_installed_should_fail_without_manager(host) -> None:
    host.binaries = set()

    with pytest.raises(UnsupportedPackageManagerError) as excinfo:
        ensure_docker_installed()

    assert host.calls == []
    assert any("docs.docker.com" in hint for hint in excinfo.value.hints)


def test_install_docker_dnf_should_add_repo_and_start_service(host) -> None:
    install_docker(DNF)

    assert host.calls == [
        ["dnf", "install", "-y", "dnf-plugins-core"],
        [
            "dnf",
            "config-manager",
            "--add-repo",
            "https://download.docker.com/linux/fedora/docker-ce.repo",
        ],
        ["dnf", "install", "-y", *DOCKER_PACKAGES],
        ["systemctl", "start", "docker"],
        ["systemctl", "enable", "docker"],
    ]


def test_install_docker_pacman_should_install_needed_packages(host) -> None:
    install_docker(PACMAN)

    assert host.calls == [
        ["pacman", "-Syu", "--noconfirm", "--needed", "docker", "docker-compose"],
        ["systemctl", "start", "docker"],
        ["systemctl", "enable", "docker"],
    ]


def test_install_docker_should_fail_when_runtime_still_missing(host) -> None:
    host.installs_docker = False

    with pytest.raises(InstallError):
        install_docker(PACMAN)


def test_install_docker_should_stop_at_first_failing_command(host) -> None:
    host.respond(("dnf", "config-manager"), (1, b""))

    with pytest.raises(CommandError) as excinfo:
        install_docker(DNF)

    assert excinfo.value.returncode == 1
    assert not host.commands_starting_with("systemctl")
    assert not host.ran("dnf", "install", "-y", *DOCKER_PACKAGES)


def test_install_docker_should_reject_missing_manager(host) -> None:
    with pytest.raises(UnsupportedPackageManagerError):
        install_docker(None)
    assert host.calls == []
