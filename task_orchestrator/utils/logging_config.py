import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FORMAT = "[%(levelname)s] %(name)s - %(message)s"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Route diagnostics away from the report stream.

    The CSV report is the only thing written to stdout; every log record
    goes to ``log_file`` when one is given (its directory is created), or
    to stderr otherwise. ``level`` is a level name such as ``"DEBUG"``;
    names ``logging`` does not know resolve to INFO. Above DEBUG, urllib3's
    per-connection chatter is held back to warnings.
    """

    logging_level = getattr(logging, level.upper(), logging.INFO)
    log_kwargs = {
        "level": logging_level,
        "format": LOG_FORMAT,
    }

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        log_kwargs["filename"] = log_file
    else:
        log_kwargs["stream"] = sys.stderr

    logging.basicConfig(**log_kwargs)

    # One connection line per task drowns the progress output.
    if logging_level > logging.DEBUG:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
