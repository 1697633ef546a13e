"""Configuration settings for the PR comment rate analyzer."""

import os
from typing import Dict

# GitHub API configuration
GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip("/")
GITHUB_BASE_URL = "https://github.com"
GITHUB_HOSTS = ("github.com", "www.github.com")

# Environment variable holding the personal access token (used when --token is omitted)
TOKEN_ENV_VAR = "GITHUB_TOKEN"

# Git remote read when the repository is auto-detected
GIT_REMOTE = os.getenv("GIT_REMOTE", "origin")
GIT_TIMEOUT = 10  # seconds

# Request configuration
REQUEST_TIMEOUT = 30
MAX_RETRIES = 3
RETRY_DELAY = 1  # seconds
PER_PAGE = 100  # GitHub maximum page size

USER_AGENT = "pr-comment-rate"

# Default headers for API requests
DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "application/vnd.github+json",
    "X-GitHub-Api-Version": "2022-11-28",
}

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
LOG_FILE = os.getenv("LOG_FILE") or None  # no file sink unless set
LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
