import logging, json, sys, time, os


class JsonLineFormatter(logging.Formatter):
    """One JSON object per line; messages are escaped, never spliced into a template."""

    converter = time.gmtime  # Use UTC timestamps

    def format(self, record):
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "name": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def get_logger(name="keyload", level=None, to_file=None):
    """
    Structured logger shared by all keyload components.

    Level and an optional log file default to KEYLOAD_LOG_LEVEL and
    KEYLOAD_LOG_FILE. Records still propagate to the root logger.
    """
    if level is None:
        level = logging.getLevelNamesMapping().get(
            os.getenv("KEYLOAD_LOG_LEVEL", "INFO").upper(), logging.INFO)
    to_file = to_file or os.getenv("KEYLOAD_LOG_FILE")

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        formatter = JsonLineFormatter()
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    return logger
