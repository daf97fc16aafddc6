from __future__ import annotations

import os
import shutil
import subprocess
from unittest.mock import MagicMock

import pytest

PACKAGE_MANAGER_BINARIES = ("dnf", "pacman", "apt-get")


class FakeHost:
    """Stands in for PATH lookups and external commands.

    ``responses`` maps a command prefix to a list of ``(returncode, stdout)``
    results consumed in order; the last one is repeated once the list has a
    single entry left. Commands without a matching prefix succeed silently.
    """

    def __init__(self) -> None:
        self.binaries: set[str] = set()
        self.calls: list[list[str]] = []
        self.responses: dict[tuple[str, ...], list[tuple[int, bytes]]] = {}
        self.installs_docker = True

    def respond(self, prefix: tuple[str, ...], *results: tuple[int, bytes]) -> None:
        self.responses[prefix] = list(results)

    def which(self, name, *args, **kwargs):
        return f"/usr/bin/{name}" if name in self.binaries else None

    def run(self, command, check=False, capture_output=False, input=None, **kwargs):
        command = list(command)
        self.calls.append(command)
        if self.installs_docker and self._is_docker_install(command):
            self.binaries.add("docker")

        for prefix in sorted(self.responses, key=len, reverse=True):
            if tuple(command[: len(prefix)]) == prefix:
                results = self.responses[prefix]
                returncode, stdout = results.pop(0) if len(results) > 1 else results[0]
                return subprocess.CompletedProcess(command, returncode, stdout, b"")
        return subprocess.CompletedProcess(command, 0, b"", b"")

    @staticmethod
    def _is_docker_install(command: list[str]) -> bool:
        if command[0] in ("dnf", "apt-get") and "docker-ce" in command:
            return True
        return command[0] == "pacman" and "docker" in command

    def commands_starting_with(self, *prefix: str) -> list[list[str]]:
        return [call for call in self.calls if tuple(call[: len(prefix)]) == prefix]

    def ran(self, *command: str) -> bool:
        return list(command) in self.calls

    @property
    def package_manager_calls(self) -> list[list[str]]:
        return [call for call in self.calls if call[0] in PACKAGE_MANAGER_BINARIES]


@pytest.fixture
def host(monkeypatch) -> FakeHost:
    fake = FakeHost()
    monkeypatch.setattr(shutil, "which", fake.which)
    monkeypatch.setattr(subprocess, "run", fake.run)
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.setattr("umbrelup.service.time.sleep", lambda seconds: None)
    return fake


def make_docker_container(status: str = "running", exit_code: int = 0) -> MagicMock:
    container = MagicMock(name=f"container[{status}]")
    container.status = status
    container.logs.return_value = iter([b"umbrel booting\n"])
    container.wait.return_value = {"StatusCode": exit_code}
    return container


@pytest.fixture
def docker_client() -> MagicMock:
    """A Docker client with no containers that creates ``new_container``."""
    client = MagicMock(name="DockerClient")
    client.new_container = make_docker_container()
    client.api.create_host_config.side_effect = lambda **kwargs: dict(kwargs)
    client.api.create_container.return_value = {"Id": "abc123"}
    client.containers.get.return_value = client.new_container
    client.containers.list.return_value = []
    return client


@pytest.fixture
def container_factory():
    return make_docker_container
