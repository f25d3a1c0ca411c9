"""
Configuration module for the ProHeadshot API
Contains logger setup and environment variables
"""

import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# -------------------------
# Logger Setup
# -------------------------
def setup_logger(
    name: str = __name__, log_file: str = "proheadshot.log"
) -> logging.Logger:
    """
    Set up and return a logger with both file and console handlers

    Args:
        name: Logger name (usually __name__)
        log_file: Path to log file

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid adding duplicate handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    file_handler = logging.FileHandler(log_file, mode="a")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


LOG_FILE = os.getenv("LOG_FILE", "proheadshot.log")

# Create the main application logger
logger = setup_logger("proheadshot", LOG_FILE)

# -------------------------
# Environment Variables
# -------------------------
# Either name is accepted for the image service credential
GEMINI_KEY = os.getenv("GEMINI_KEY") or os.getenv("API_KEY")
GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.5-flash-image")
GEMINI_API_BASE = os.getenv(
    "GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta"
)
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "120"))

# quota
DAILY_GENERATION_LIMIT = int(os.getenv("DAILY_GENERATION_LIMIT", "10"))
QUOTA_STORAGE_KEY = "proheadshot_daily_usage"
QUOTA_BACKEND = os.getenv("QUOTA_BACKEND", "file").lower()
QUOTA_FILE_PATH = os.getenv("QUOTA_FILE_PATH", ".proheadshot_usage.json")

# supabase
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY")

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]


# Log configuration status
logger.info("Configuration loaded successfully")
logger.debug(f"GEMINI_KEY configured: {bool(GEMINI_KEY)}")
logger.debug(f"GEMINI_IMAGE_MODEL: {GEMINI_IMAGE_MODEL}")
logger.debug(f"DAILY_GENERATION_LIMIT: {DAILY_GENERATION_LIMIT}")
logger.debug(f"QUOTA_BACKEND: {QUOTA_BACKEND}")
logger.debug(f"SUPABASE_URL configured: {bool(SUPABASE_URL)}")
logger.debug(f"SUPABASE_SERVICE_KEY configured: {bool(SUPABASE_SERVICE_KEY)}")
