"""Dataclasses and fixed provisioning constants."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

IMAGE_NAME = "dockurr/umbrel"
CONTAINER_NAME = "umbrel"
SERVICE_NAME = "docker"
SERVICE_START_DELAY = 3  # seconds to wait before re-checking a started service
DOCKER_INSTALL_DOCS = "https://docs.docker.com/engine/install/"


class RunMode(Enum):
    """How the container is started."""

    DETACHED = "detached"  # background, cleaned up and verified
    ATTACHED = "attached"  # foreground, removes itself on exit


@dataclass(frozen=True)
class PackageManager:
    """Represents a supported system package manager."""

    name: str  # One of "dnf", "pacman", "apt"
    binary: str  # Executable probed on PATH
    description: str  # Distribution family, for log messages


@dataclass(frozen=True)
class Mount:
    """A host path bind-mounted into the container."""

    source: str
    target: str
    mode: str = "rw"

    def bind(self) -> str:
        """Return the mount in ``source:target:mode`` form."""
        return f"{self.source}:{self.target}:{self.mode}"


@dataclass
class ContainerSpec:
    """Everything needed to create the Umbrel container."""

    image: str
    name: str
    data_dir: Path  # Host directory mounted at /data
    pid_mode: str = "host"
    host_port: int = 80
    container_port: int = 80
    docker_socket: str = "/var/run/docker.sock"
    stop_timeout: int = 60

    @property
    def mounts(self) -> list[Mount]:
        """Bind mounts in the order they are passed to the daemon."""
        return [
            Mount(source=str(self.data_dir), target="/data"),
            Mount(source=self.docker_socket, target=self.docker_socket),
        ]

    @property
    def port_bindings(self) -> dict[int, int]:
        """Container port to host port mapping."""
        return {self.container_port: self.host_port}


def default_container_spec(cwd: Path | None = None) -> ContainerSpec:
    """Build the Umbrel container spec with data stored under ``cwd``."""
    base = cwd if cwd is not None else Path.cwd()
    return ContainerSpec(
        image=IMAGE_NAME,
        name=CONTAINER_NAME,
        data_dir=base / "umbrel",
    )
