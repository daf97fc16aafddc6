"""Ensure the runtime's systemd service is running and enabled."""

import logging
import time

from umbrelup.errors import ServiceError
from umbrelup.models import SERVICE_NAME, SERVICE_START_DELAY
from umbrelup.utils.command import command_succeeds, run_command

logger = logging.getLogger(__name__)


def is_active(service: str) -> bool:
    """Return True if systemd reports the service as active."""
    return command_succeeds(["systemctl", "is-active", "--quiet", service])


def is_enabled(service: str) -> bool:
    """Return True if the service starts at boot."""
    return command_succeeds(["systemctl", "is-enabled", "--quiet", service])


def start_and_enable(service: str = SERVICE_NAME) -> None:
    """Unconditionally start the service and enable it for boot."""
    logger.info("Starting and enabling the %s service...", service)
    run_command(["systemctl", "start", service])
    run_command(["systemctl", "enable", service])


def ensure_service(
    service: str = SERVICE_NAME,
    start_delay: float = SERVICE_START_DELAY,
) -> None:
    """Make sure the service is active and enabled.

    A stopped service is started once and re-checked after ``start_delay``
    seconds. Nothing is changed when the service is already active and
    enabled.

    Args:
        service: systemd unit name
        start_delay: Seconds to wait before re-checking a started service

    Raises:
        ServiceError: If the service is still inactive after starting it

    """
    if is_active(service):
        logger.info("Service %s is already active.", service)
    else:
        logger.info("Service %s is not active. Starting...", service)
        run_command(["systemctl", "start", service])
        time.sleep(start_delay)
        if not is_active(service):
            msg = f"Could not start the {service} service."
            raise ServiceError(
                msg,
                hints=(f"Check the system logs: journalctl -u {service}.service",),
            )
        logger.info("Service %s started.", service)

    if is_enabled(service):
        logger.info("Service %s is already enabled at boot.", service)
    else:
        logger.info("Service %s is not enabled at boot. Enabling...", service)
        run_command(["systemctl", "enable", service])
        logger.info("Service %s enabled at boot.", service)
