"""Base Container class implementation."""

import logging
import sys
from pathlib import Path

import docker
from docker.models.containers import Container as DockerContainer
from docker.utils import parse_repository_tag

from umbrelup.errors import ContainerRunError, ImagePullError, InstallError
from umbrelup.models import DOCKER_INSTALL_DOCS, ContainerSpec
from umbrelup.utils.container.runtime import detect_container_runtime

logger = logging.getLogger(__name__)


class Runtime:
    """The installed Docker CLI and a way to reach its daemon."""

    def __init__(self, runtime_path: str | None, socket: Path | None = None) -> None:
        """Initialize the runtime with a path.

        Args:
            runtime_path: Path to the docker binary, None if it is not installed
            socket: Daemon socket, None to use the environment defaults

        """
        self._runtime_path = runtime_path
        self._socket = socket

    @classmethod
    def detect(cls, socket: Path | None = None) -> "Runtime":
        """Build a runtime from whatever Docker binary is on PATH."""
        return cls(detect_container_runtime(), socket)

    @property
    def is_available(self) -> bool:
        """Whether the docker binary was found."""
        return self._runtime_path is not None

    @property
    def path(self) -> str | None:
        return self._runtime_path

    def client(self) -> docker.DockerClient:
        """Connect to the runtime's daemon.

        Raises:
            InstallError: If the docker binary is not installed
            ContainerRunError: If the daemon cannot be reached

        """
        if not self.is_available:
            msg = "Docker is not installed, cannot connect to its daemon."
            raise InstallError(msg, hints=(f"Install Docker: {DOCKER_INSTALL_DOCS}",))

        try:
            if self._socket is None:
                return docker.from_env()
            base_url = str(self._socket)
            if "://" not in base_url:
                base_url = f"unix://{base_url}"
            return docker.DockerClient(base_url=base_url)
        except docker.errors.DockerException as exc:
            msg = f"Could not connect to the Docker daemon: {exc}"
            raise ContainerRunError(msg) from exc


class Container:
    """Pulls the image and runs one named container from a ``ContainerSpec``."""

    def __init__(self, spec: ContainerSpec, client: docker.DockerClient) -> None:
        self.spec = spec
        self.client = client

    @property
    def _log_hint(self) -> tuple[str, ...]:
        return (f"Check the Docker logs: docker logs {self.spec.name}",)

    def pull(self) -> None:
        """Pull the spec's image, raising ``ImagePullError`` on failure."""
        repository, tag = parse_repository_tag(self.spec.image)
        tag = tag or "latest"
        logger.info("Pulling image %s:%s...", repository, tag)
        try:
            self.client.images.pull(repository, tag=tag)
        except docker.errors.DockerException as exc:
            msg = f"Failed to pull image {self.spec.image!r}: {exc}"
            raise ImagePullError(
                msg,
                hints=("Check your internet connection and the Docker configuration.",),
            ) from exc
        logger.info("Image %s pulled.", self.spec.image)

    def find(self) -> DockerContainer | None:
        """Return the container with exactly the spec's name, if any.

        Raises:
            ContainerRunError: If the daemon cannot list containers

        """
        try:
            matches = self.client.containers.list(
                all=True,
                filters={"name": f"^/{self.spec.name}$"},
            )
        except docker.errors.DockerException as exc:
            msg = f"Failed to look up container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg) from exc
        return matches[0] if matches else None

    def is_running(self) -> bool:
        """Check whether a container with the spec's name is running."""
        container = self.find()
        return container is not None and container.status == "running"

    def remove_existing(self) -> None:
        """Stop and remove a previous container sharing the spec's name."""
        container = self.find()
        if container is None:
            logger.debug("No existing container named %s", self.spec.name)
            return

        try:
            if container.status == "running":
                logger.info("Existing container %s is running. Stopping...", self.spec.name)
                container.stop()
            logger.info("Removing existing container %s...", self.spec.name)
            container.remove()
        except docker.errors.APIError as exc:
            msg = f"Failed to remove existing container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg) from exc

    def _create(self) -> DockerContainer:
        """Create, but do not start, the container."""
        api = self.client.api
        host_config = api.create_host_config(
            binds=[mount.bind() for mount in self.spec.mounts],
            port_bindings=self.spec.port_bindings,
            pid_mode=self.spec.pid_mode,
        )
        try:
            created = api.create_container(
                image=self.spec.image,
                name=self.spec.name,
                ports=list(self.spec.port_bindings),
                host_config=host_config,
                stop_timeout=self.spec.stop_timeout,
            )
            return self.client.containers.get(created["Id"])
        except docker.errors.DockerException as exc:
            msg = f"Failed to create container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg) from exc

    def run_detached(self) -> DockerContainer:
        """Start the container in the background and verify it is running.

        Raises:
            ContainerRunError: If the container fails to start or stops at once

        """
        logger.info(
            "Running container %s with image %s...",
            self.spec.name,
            self.spec.image,
        )
        container = self._create()
        try:
            container.start()
        except docker.errors.DockerException as exc:
            msg = f"Failed to start container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg, hints=self._log_hint) from exc

        if not self.is_running():
            msg = f"Container {self.spec.name!r} is not running after start."
            raise ContainerRunError(msg, hints=self._log_hint)
        logger.info("Container %s started and running in the background.", self.spec.name)
        return container

    def run_attached(self) -> int:
        """Run the container in the foreground and remove it when it exits.

        Output is streamed to stdout until the container stops. An interrupt
        stops the container, a second one kills it.

        Returns:
            int: The container's exit code, or 130 if interrupted

        Raises:
            ContainerRunError: If the container cannot be run or removed

        """
        logger.info(
            "Running container %s in the foreground with image %s...",
            self.spec.name,
            self.spec.image,
        )
        container = self._create()
        try:
            exit_code = self._attach(container)
        except BaseException:
            # Cleanup failures must not replace the error already raised
            self._remove(container, quiet=True)
            raise
        self._remove(container)

        logger.info("Container %s exited with code %d.", self.spec.name, exit_code)
        return exit_code

    def _attach(self, container: DockerContainer) -> int:
        """Start ``container``, stream its output and wait for it to exit."""
        try:
            container.start()
            for chunk in container.logs(stream=True, follow=True):
                sys.stdout.buffer.write(chunk)
                sys.stdout.buffer.flush()
            result = container.wait()
        except KeyboardInterrupt:
            logger.info("Interrupted, stopping container %s...", self.spec.name)
            self._stop(container)
            return 130
        except docker.errors.DockerException as exc:
            msg = f"Failed to run container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg, hints=self._log_hint) from exc
        return int(result.get("StatusCode", 1))

    def _stop(self, container: DockerContainer) -> None:
        try:
            container.stop(timeout=self.spec.stop_timeout)
        except KeyboardInterrupt:
            logger.warning("Interrupted again, killing container %s...", self.spec.name)
            try:
                container.kill()
            except docker.errors.DockerException as exc:
                msg = f"Failed to kill container {self.spec.name!r}: {exc}"
                raise ContainerRunError(msg) from exc
        except docker.errors.DockerException as exc:
            msg = f"Failed to stop container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg) from exc

    def _remove(self, container: DockerContainer, quiet: bool = False) -> None:
        """Force-remove ``container``; a container that is already gone is fine.

        With ``quiet`` set, failures are logged instead of raised.
        """
        try:
            container.remove(force=True)
        except docker.errors.NotFound:
            logger.debug("Container %s was already removed", self.spec.name)
        except docker.errors.DockerException as exc:
            if quiet:
                logger.warning("Could not remove container %s: %s", self.spec.name, exc)
                return
            msg = f"Failed to remove container {self.spec.name!r}: {exc}"
            raise ContainerRunError(msg) from exc
