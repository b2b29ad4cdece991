import logging
import sys


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure process-wide logging for the intake service.
    Called once by the app factory; safe to call again in tests.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

