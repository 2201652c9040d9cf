import atexit
import logging
from logging.handlers import RotatingFileHandler, QueueHandler, QueueListener
from queue import Queue
from pathlib import Path
from typing import List, Tuple
from config.settings import LOG_LEVEL, LOG_FILE

# One queue + listener per log file; every logger writing to that file shares it
_LISTENERS_BY_FILE: dict[str, QueueListener] = {}
_QUEUES_BY_FILE: dict[str, Queue] = {}
# Handlers handed out by setup_logger, detached again on shutdown
_ATTACHED: List[Tuple[logging.Logger, QueueHandler]] = []

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _file_handler(log_file: str, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_file,
        mode="a",
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
        delay=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def _queue_handler_for(log_file: str, max_bytes: int, backup_count: int) -> QueueHandler:
    log_file = str(Path(log_file))
    if log_file not in _LISTENERS_BY_FILE:
        q: Queue = Queue(-1)
        listener = QueueListener(
            q, _file_handler(log_file, max_bytes, backup_count), respect_handler_level=True
        )
        listener.start()
        _QUEUES_BY_FILE[log_file] = q
        _LISTENERS_BY_FILE[log_file] = listener
    return QueueHandler(_QUEUES_BY_FILE[log_file])


def shutdown_logging():
    """
    Flush and stop every file listener, then detach the queue handlers so a
    later setup_logger call arms a fresh listener. Safe to call more than once.
    """
    while _LISTENERS_BY_FILE:
        log_file, listener = _LISTENERS_BY_FILE.popitem()
        _QUEUES_BY_FILE.pop(log_file, None)
        try:
            listener.stop()
        except RuntimeError:
            # Listener thread was never started or already joined
            pass
        for handler in listener.handlers:
            handler.close()

    while _ATTACHED:
        logger, handler = _ATTACHED.pop()
        logger.removeHandler(handler)


atexit.register(shutdown_logging)


def setup_logger(
    name: str,
    log_file: str = LOG_FILE,
    level=LOG_LEVEL,
    max_bytes: int = 1024 * 1024 * 2,
    backup_count: int = 3,
) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Module reloads must not stack handlers
    if not logger.handlers:
        handler = _queue_handler_for(log_file, max_bytes, backup_count)
        handler.setLevel(level)
        logger.addHandler(handler)
        _ATTACHED.append((logger, handler))

    return logger
