"""Gateway logging.

Connection lifecycle, sidecar calls and HTTP requests all log through the
shared loguru ``log``. Request handlers run inside ``log.contextualize`` so
every line they emit carries the request id; lines from background work
(reconnects, group refreshes) show ``-`` instead.
"""

import sys
from pathlib import Path
from loguru import logger

NO_REQUEST = "-"

PRETTY_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[request_id]} | {name}:{line} | {message}"

logger.remove()
logger.configure(extra={"request_id": NO_REQUEST})


def setup_logging(debug: bool = False, log_format: str = "pretty", logs_dir: str | Path = "logs") -> None:
    """Install the stderr sink and the daily gateway log file.

    ``log_format="json"`` serializes stderr lines for log collectors; debug
    mode always uses the coloured format so QR and reconnect traces stay
    readable in a terminal.
    """
    logger.remove()
    logger.configure(extra={"request_id": NO_REQUEST})

    if log_format == "pretty" or debug:
        logger.add(
            sys.stderr,
            format=PRETTY_FORMAT,
            level="DEBUG" if debug else "INFO",
            colorize=True,
        )
    else:
        logger.add(
            sys.stderr,
            format="{message}",
            level="INFO",
            serialize=True,
        )

    logs_dir = Path(logs_dir)
    logs_dir.mkdir(exist_ok=True)

    logger.add(
        logs_dir / "gateway_{time:YYYY-MM-DD}.log",
        format=FILE_FORMAT,
        rotation="00:00",
        retention="30 days",
        compression="gz",
        level="INFO",
    )


log = logger
