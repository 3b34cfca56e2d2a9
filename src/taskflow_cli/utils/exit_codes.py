"""
Exit codes for TaskFlow CLI.

Semantic exit codes so that scripts wrapping the CLI can tell why a
command failed and react accordingly.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (not logged in, invalid credentials, expired session)
ERROR_AUTH_FAILURE = 3

# Network or API error (server unreachable, timeout, 5xx)
ERROR_NETWORK = 4

# Resource not found
ERROR_NOT_FOUND = 5

# Concurrent modification rejected by the server
ERROR_CONFLICT = 6


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_AUTH_FAILURE: "ERROR_AUTH_FAILURE",
        ERROR_NETWORK: "ERROR_NETWORK",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        ERROR_CONFLICT: "ERROR_CONFLICT",
    }
    return code_names.get(code, f"UNKNOWN({code})")

