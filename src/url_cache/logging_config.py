import logging


def setup_logging(level: str = "INFO", name: str = "url_cache") -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        # already configured: only the level changes
        for h in logger.handlers:
            h.setLevel(level)
        return logger
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[%(asctime)s][%(levelname)s] %(name)s: %(message)s", "%H:%M:%S"))
    logger.addHandler(handler)
    return logger
