"""Logging helpers for consistent console output."""
import logging
import sys
import tempfile
from pathlib import Path
from typing import List, Optional

_NOISY_LOGGERS = ("urllib3", "requests")


def _file_handler(log_path: Path) -> Optional[logging.Handler]:
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path, mode="w", encoding="utf-8")
    except OSError as exc:
        fallback = Path(tempfile.gettempdir()) / "paper2deck.run.log"
        try:
            handler = logging.FileHandler(fallback, mode="w", encoding="utf-8")
        except OSError:
            print(
                f"[WARN] Failed to open log file at {log_path} ({exc}). "
                "Continuing without file logging.",
                file=sys.stderr,
            )
            return None
        print(
            f"[WARN] Failed to open log file at {log_path} ({exc}). "
            f"Logging to {fallback} instead.",
            file=sys.stderr,
        )
        return handler


def setup_logging(verbose: bool = False, log_path: Optional[Path] = None) -> None:
    """Configure root logging for the CLI; library code only uses the ``paper2deck`` logger."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_path is not None:
        handler = _file_handler(Path(log_path))
        if handler is not None:
            handlers.append(handler)
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
