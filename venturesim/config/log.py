from __future__ import annotations
import logging

from venturesim.config.env import get_log_config

LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(module)s.%(funcName)s:%(lineno)d: %(message)s"


def configure_logging(app=None) -> logging.Logger:
    """Attach a single stream handler to the package logger (and the Flask app logger).

    Safe to call more than once; an existing handler is reused.
    """
    cfg = get_log_config()
    level = getattr(logging, cfg.level.upper(), logging.INFO)

    root = logging.getLogger("venturesim")
    root.setLevel(level)
    if not any(getattr(h, "_venturesim", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._venturesim = True  # marker so repeated calls don't stack handlers
        root.addHandler(handler)

    if app is not None:
        app.logger.setLevel(level)
    return root
