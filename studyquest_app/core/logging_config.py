"""
Logging setup for StudyQuest.

Everything in the app logs through ``current_app.logger``. That logger writes
to the console and, unless disabled, to a rotating ``studyquest.log`` file.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from flask import Flask

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(module)s: %(message)s'
LOG_FILE_NAME = 'studyquest.log'
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def setup_logging(
    app: Flask,
    log_level: str = 'INFO',
    log_dir: Optional[str] = None,
    log_to_file: bool = True
) -> logging.Logger:
    """
    Attach handlers to ``app.logger`` and return it.

    Calling it again replaces the handlers, so several apps built in one
    process (the test suite does this) never stack duplicate output.
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    logger = app.logger
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.propagate = False

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_to_file:
        if log_dir is None:
            log_dir = os.path.join(os.path.dirname(app.root_path), 'logs')
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=MAX_LOG_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logging.getLogger('werkzeug').setLevel(logging.WARNING)

    logger.info(f"Logging initialized: level={log_level}, dir={log_dir if log_to_file else '-'}")
    return logger
