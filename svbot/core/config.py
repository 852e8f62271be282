"""
Soccerverse Discord Bot - Configuration Module
==============================================

Environment loading, startup validation and shared constants.

Author: Soccerverse Bot
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from svbot.core.logger import logger


# =============================================================================
# Timezone Configuration
# =============================================================================

# The game community runs on French time; weekly refreshes and
# date formatting both follow it.
PARIS_TZ = ZoneInfo("Europe/Paris")


# =============================================================================
# Configuration Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


@dataclass
class ConfigValidationResult:
    """Result of configuration validation."""
    valid: bool
    missing_required: list[str] = field(default_factory=list)
    missing_optional: list[str] = field(default_factory=list)
    invalid_format: list[tuple[str, str]] = field(default_factory=list)  # (var_name, reason)


REQUIRED_ENV_VARS: list[str] = [
    "DISCORD_TOKEN",
]

OPTIONAL_ENV_VARS: dict[str, str] = {
    "DATA_PACK_URL": "Name mapping data pack location",
    "MAPPINGS_DIR": "Directory holding the persisted mapping snapshot",
    "SYNC_GUILD_ID": "Guild used for instant slash command sync",
}


def validate_config() -> ConfigValidationResult:
    """
    Validate environment variables at startup.

    Returns:
        ConfigValidationResult with validation status and any issues found.
    """
    result = ConfigValidationResult(valid=True)

    for var in REQUIRED_ENV_VARS:
        if not os.getenv(var):
            result.missing_required.append(var)
            result.valid = False

    for var in OPTIONAL_ENV_VARS:
        if not os.getenv(var):
            result.missing_optional.append(var)

    guild_id = os.getenv("SYNC_GUILD_ID")
    if guild_id and not guild_id.isdigit():
        result.invalid_format.append(("SYNC_GUILD_ID", "Must be a numeric Discord guild ID"))
        result.valid = False

    data_pack_url = os.getenv("DATA_PACK_URL")
    if data_pack_url and not data_pack_url.startswith(("http://", "https://")):
        result.invalid_format.append(("DATA_PACK_URL", "Must be an http(s) URL"))
        result.valid = False

    return result


def validate_and_log_config() -> None:
    """
    Validate configuration and log results.

    Raises:
        ConfigValidationError: If required configuration is missing or malformed.
    """
    result = validate_config()

    for var in result.missing_required:
        logger.error("Missing Required Configuration", [
            ("Variable", var),
            ("Action", f"Add {var}=<value> to your .env file"),
        ])

    for var, reason in result.invalid_format:
        logger.error("Invalid Configuration Format", [
            ("Variable", var),
            ("Reason", reason),
        ])

    if result.missing_optional:
        logger.info("Optional Settings Using Defaults", [
            ("Variables", ", ".join(result.missing_optional)),
        ])

    if not result.valid:
        raise ConfigValidationError(
            f"Missing required config: {', '.join(result.missing_required)}"
            + (f"; Invalid format: {', '.join(v for v, _ in result.invalid_format)}" if result.invalid_format else "")
        )

    logger.info("Configuration Validated Successfully", [
        ("Required", f"{len(REQUIRED_ENV_VARS)} OK"),
        ("Optional", f"{len(OPTIONAL_ENV_VARS) - len(result.missing_optional)}/{len(OPTIONAL_ENV_VARS)} configured"),
    ])


# =============================================================================
# Environment Loaders
# =============================================================================

DEFAULT_DATA_PACK_URL = "https://elrincondeldt.com/sv/rincon_v1.json"


def load_data_pack_url() -> str:
    return os.getenv("DATA_PACK_URL") or DEFAULT_DATA_PACK_URL


def load_mappings_dir() -> Path:
    return Path(os.getenv("MAPPINGS_DIR") or "mappings")


def load_sync_guild_id() -> Optional[int]:
    """Guild ID for instant command sync, or None for global sync."""
    value = os.getenv("SYNC_GUILD_ID", "")
    return int(value) if value.isdigit() else None


# =============================================================================
# Mapping Refresh Policy
# =============================================================================

MAPPING_REFRESH_INTERVAL: timedelta = timedelta(days=7)
WEEKLY_REFRESH_WEEKDAY: int = 6  # Sunday (Monday == 0)
WEEKLY_REFRESH_HOUR: int = 3
WEEKLY_REFRESH_MINUTE: int = 0
SNAPSHOT_FILENAME: str = "soccerverse_data.json"
SNAPSHOT_FORMAT_VERSION: str = "3.0"


# =============================================================================
# Network & Retry Constants
# =============================================================================

DATA_PACK_TIMEOUT: float = 30.0  # Data pack download timeout (seconds)
ADMIN_REFRESH_TIMEOUT: float = 60.0  # Upper bound for /update (seconds)
SCHEDULER_ERROR_RETRY: int = 3600  # Scheduler loop retry delay on error (seconds)
USER_AGENT: str = "SoccerverseBot/3.0"


# =============================================================================
# Discord Limits
# =============================================================================

CLUB_SEARCH_LIMIT: int = 10
DISCORD_EMBED_FIELD_VALUE_LIMIT: int = 1024
ERROR_PREVIEW_LENGTH: int = 200
EMBED_FOOTER_TEXT: str = "Soccerverse Bot v3.0"
