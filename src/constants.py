from __future__ import annotations

PROJECT_NAME = "multi-account-github-mcp"
CONFIG_FILE_NAME = f"{PROJECT_NAME}.yml"

GH_BINARY = "gh"
GH_INSTALL_HINT = "Install from https://cli.github.com"

# Only channel through which a credential reaches the child process.
CREDENTIAL_ENV_VAR = "GH_TOKEN"

# Keep gh output machine-readable and non-interactive.
CHILD_ENV_OVERRIDES: dict[str, str] = {
    "NO_COLOR": "1",
    "GH_PROMPT_DISABLED": "1",
    "GH_NO_UPDATE_NOTIFIER": "1",
}

REDACTED = "***"

VERSION = "0.1.0"
