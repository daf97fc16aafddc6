"""Exceptions raised while provisioning the host."""


class ProvisionError(RuntimeError):
    """Base class for every fatal provisioning failure.

    Args:
        message: Human readable description of the failure
        hints: Follow-up suggestions shown to the operator

    """

    def __init__(self, message: str, hints: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.hints = hints


class CommandError(ProvisionError):
    """An external command exited with a non-zero status."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command {' '.join(command)!r} failed with exit code {returncode}"
        if stderr:
            msg = f"{msg}: {stderr.strip()}"
        super().__init__(msg)


class PrivilegeError(ProvisionError):
    """The process is not running with superuser privileges."""


class UnsupportedPackageManagerError(ProvisionError):
    """None of dnf, pacman or apt was found."""


class InstallError(ProvisionError):
    """The runtime is still missing after installation."""


class ServiceError(ProvisionError):
    """The runtime service could not be started."""


class ImagePullError(ProvisionError):
    """The container image could not be pulled."""


class ContainerRunError(ProvisionError):
    """The container could not be created, started or verified."""
