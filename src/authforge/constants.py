"""Constants for authforge."""

# Subprocess timeouts (seconds)
PROBE_TIMEOUT = 10

BACKUP_SUFFIX = ".bak"
STDERR_EXCERPT_CHARS = 500
CONFIG_ENV_VAR = "AUTHFORGE_CONFIG"
