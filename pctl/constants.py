"""
pctl Constants

Centralized constants for API paths, headers, and local defaults.
"""

# Local state
DEFAULT_HOME_DIR = "~/.pctl"
SESSIONS_FILENAME = "sessions.yml"
LOGS_DIRNAME = "logs"
ENV_FILENAME = ".env"
SESSIONS_FILE_MODE = 0o600

# HTTP Configuration
DEFAULT_TIMEOUT_SECONDS = 30
API_KEY_HEADER = "X-API-Key"
AUTHORIZATION_HEADER = "Authorization"
USER_AGENT = "pctl/0.1.0"

# Portainer API paths
API_AUTH = "/api/auth"
API_ENDPOINTS = "/api/endpoints"
API_TAGS = "/api/tags"
API_STACKS = "/api/stacks"
API_STACKS_CREATE_SWARM = "/api/stacks/create/swarm/string"

# Confirmation answers (case-insensitive)
CONFIRM_YES = "yes"
CONFIRM_NO = "no"

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"
