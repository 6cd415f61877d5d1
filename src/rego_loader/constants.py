"""Application-wide constants for rego-loader.

Constants that define application behavior.
For user-configurable settings, see config.py.
"""

import os

from platformdirs import user_config_dir

# ============================================================================
# Application Identity
# ============================================================================

APP_NAME: str = "rego-loader"

# Logger names are "<APP_NAME>.<area>", e.g. "rego-loader.loader"
LOGGER_NAMESPACE: str = APP_NAME

# ============================================================================
# Configuration File
# ============================================================================

# OS-specific config directory:
# - macOS: ~/Library/Application Support/rego-loader/
# - Linux: ~/.config/rego-loader/
# - Windows: %APPDATA%\rego-loader\
CONFIG_DIR: str = os.path.realpath(user_config_dir(APP_NAME))

CONFIG_FILENAME: str = "rego_loader_config.json"

# ============================================================================
# Policy Source Collection
# ============================================================================

# File suffixes treated as Rego sources when walking directories
DEFAULT_REGO_EXTENSIONS: tuple[str, ...] = (".rego",)

# Rego unit tests live next to policies but are not policies themselves
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = ("*_test.rego",)

# ============================================================================
# Remote Fetch
# ============================================================================

DEFAULT_REMOTE_TIMEOUT_SECONDS: int = 30
MIN_REMOTE_TIMEOUT_SECONDS: int = 1
MAX_REMOTE_TIMEOUT_SECONDS: int = 300  # 5 minutes
