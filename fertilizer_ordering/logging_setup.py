# fertilizer_ordering/logging_setup.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(app):
    """Attach a single stream handler to the package logger."""
    level = getattr(logging, app.config.get("LOG_LEVEL", "INFO"), logging.INFO)

    root = logging.getLogger("fertilizer_ordering")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    app.logger.setLevel(level)
    return root
