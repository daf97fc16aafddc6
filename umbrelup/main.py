"""UmbrelUp - Provision Docker and run Umbrel on a Linux host."""

import logging
import sys
from pathlib import Path

from umbrelup.errors import ProvisionError
from umbrelup.installers import ensure_docker_installed
from umbrelup.models import RunMode, default_container_spec
from umbrelup.service import ensure_service
from umbrelup.utils.container.base import Container, Runtime
from umbrelup.utils.parsers.args import parse_args
from umbrelup.utils.privileges import require_root

logger = logging.getLogger(__name__)


def provision(mode: RunMode = RunMode.DETACHED, socket: Path | None = None) -> int:
    """Run every provisioning step in order.

    Returns:
        int: 0 for a detached run, the container's exit code for an attached run

    Raises:
        ProvisionError: On the first failing step

    """
    logger.info("Step 1: checking root privileges...")
    require_root()

    logger.info("Step 2: checking whether Docker is installed...")
    ensure_docker_installed()

    logger.info("Step 3: checking the Docker service...")
    ensure_service()

    spec = default_container_spec()
    runtime = Runtime.detect(socket)
    logger.debug("Using container runtime %s", runtime.path)
    container = Container(spec, runtime.client())

    logger.info("Step 4: pulling image %s...", spec.image)
    container.pull()

    logger.info("Step 5: preparing container %s...", spec.name)
    if mode is RunMode.ATTACHED:
        return container.run_attached()

    container.remove_existing()
    container.run_detached()
    logger.info("Open Umbrel at http://localhost (or this machine's IP).")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point."""
    args = parse_args(argv)

    # Set logging level
    log_level = getattr(logging, args.verbosity)
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    mode = RunMode.ATTACHED if args.attach else RunMode.DETACHED
    logger.info("Starting Docker automation for Umbrel (%s)", mode.value)

    try:
        exit_code = provision(mode=mode, socket=args.socket)
    except ProvisionError as exc:
        logger.error("%s", exc)
        for hint in exc.hints:
            logger.error("%s", hint)
        return 1

    logger.info("Done.")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
