"""
Logging for the notes API and the command-line client.

Everything logs under the ``ainotes`` namespace to stderr, so the CLI's
own output on stdout stays clean.
"""

import logging
import sys

ROOT_LOGGER = 'ainotes'

# Chatty per-request loggers from the HTTP client and Socket.IO stack
_QUIET_LOGGERS = ('httpx', 'httpcore', 'engineio', 'socketio')


def setup_logging(debug: bool = False) -> logging.Logger:
    """
    Configure logging for a server or CLI process.

    With ``debug`` off, the application logs at INFO and the third-party
    transport loggers are held at WARNING.

    :param debug: Log everything at DEBUG, third-party loggers included
    :type debug: bool
    :return: The ``ainotes`` root logger
    :rtype: logging.Logger
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)

    return logging.getLogger(ROOT_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """
    Logger for one part of the app, e.g. ``get_logger('services.notes')``.

    :param name: Dotted component name below ``ainotes``
    :type name: str
    :return: The ``ainotes.<name>`` logger
    :rtype: logging.Logger
    """
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')
