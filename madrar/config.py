# madrar/config.py

import os
import logging

# --- Database Configuration ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))  # <project>/madrar/ -> <project>/
DATA_DIR = os.environ.get("MADRAR_DATA_DIR", os.path.join(BASE_DIR, "data"))
DB_NAME = "madrar_inventory.db"
DATABASE_PATH = os.path.join(DATA_DIR, DB_NAME)

# Seconds sqlite waits for the write lock before giving up
DB_BUSY_TIMEOUT = 10.0

# --- Logging Configuration ---
LOGS_DIR = os.environ.get("MADRAR_LOG_DIR", os.path.join(BASE_DIR, "logs"))
LOG_FILE_NAME = "app.log"
LOG_FILE_PATH = os.path.join(LOGS_DIR, LOG_FILE_NAME)

LOG_LEVEL = logging.DEBUG
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': LOG_FORMAT,
            'datefmt': '%Y-%m-%d %H:%M:%S',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'level': logging.INFO,
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'standard',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024 * 1024 * 5,  # 5 MB
            'backupCount': 5,
            'level': logging.DEBUG,
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': LOG_LEVEL,
    },
}

# --- Application Settings ---
DEFAULT_LANGUAGE = os.environ.get("MADRAR_LANGUAGE", "en")

# Guards the bulk reset store function
ADMIN_RESET_PASSWORD = os.environ.get("MADRAR_ADMIN_PASSWORD", "madrar-admin")

# Money is kept to two decimal places
MONEY_PLACES = 2


def ensure_directories():
    """Creates the data and log directories if they do not exist yet."""
    for directory in (DATA_DIR, LOGS_DIR):
        if not os.path.exists(directory):
            os.makedirs(directory)
