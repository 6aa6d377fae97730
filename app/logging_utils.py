"""Process-wide logging setup for the finance backend.

``configure_logging`` installs a single stream handler on the root logger the
first time it is called; later calls only adjust the level so repeated app
construction (tests, reloads) never duplicates handlers.
"""

import logging

_HANDLER_INSTALLED = False


def configure_logging(level: str | int = logging.INFO) -> None:
    global _HANDLER_INSTALLED

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if _HANDLER_INSTALLED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)
    _HANDLER_INSTALLED = True
