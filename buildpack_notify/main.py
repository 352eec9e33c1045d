"""
buildpack_notify/main.py
Command-line entry point, run periodically by the scheduler.
Exports: configure_logging, main
"""

import logging
import os
import sys

from dotenv import load_dotenv

from buildpack_notify.cf.client import CloudFoundryClient
from buildpack_notify.config import load_config
from buildpack_notify.mailer import SMTPMailer
from buildpack_notify.runner import NotifyRuntime, run_notify
from buildpack_notify.shared import DEFAULT_LOG_LEVEL

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> None:
    """Configure root logging from LOG_LEVEL."""
    level_name = os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main() -> int:
    """
    Run one notification pass.

    Returns:
        Process exit status: 0 on success, 1 on any fatal error.
    """
    load_dotenv()
    configure_logging()
    try:
        config = load_config()
        client = CloudFoundryClient.connect(config.cf_api)
        result = run_notify(
            config=config.notify,
            runtime=NotifyRuntime(client=client, mailer=SMTPMailer(config.email)),
            logger=logger,
        )
    except RuntimeError as exc:
        logger.error("Buildpack notification run aborted: %s", exc)
        return 1
    logger.info(
        "Run complete: %d changed buildpacks, %d outdated apps, %d owners, %d e-mails%s.",
        result.changed_buildpacks,
        result.outdated_apps,
        result.owners,
        result.sent,
        " (dry run)" if result.dry_run else "",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
