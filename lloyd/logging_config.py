"""
Logging setup for the lloyd command line.

Library modules only create loggers; handlers are installed here.
"""

import logging
import logging.config
import sys
from pathlib import Path


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure the ``lloyd`` logger.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to an additional log file
    """
    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'level': level,
            'formatter': 'simple',
            'stream': sys.stderr,
        }
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers['file'] = {
            'class': 'logging.FileHandler',
            'level': level,
            'formatter': 'standard',
            'filename': str(log_file),
        }

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S'
            },
            'simple': {
                'format': '%(levelname)s - %(message)s'
            }
        },
        'handlers': handlers,
        'loggers': {
            'lloyd': {
                'level': level,
                'handlers': list(handlers),
                'propagate': False
            }
        }
    })
    return logging.getLogger('lloyd')
