"""Application settings via pydantic-settings.

Loads from command-line flags, the environment and a .env file, in that order
of precedence.
"""

from __future__ import annotations

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

VALID_LOG_LEVELS = frozenset({"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"})


class Settings(BaseSettings):
    """Venari configuration.

    Every field maps to a ``VENARI_``-prefixed environment variable and, when
    built with :meth:`from_cli`, to a kebab-case flag: ``discord_test_guild``
    is read from ``--discord-test-guild`` or ``VENARI_DISCORD_TEST_GUILD``.
    """

    # Discord
    discord_token: str = ""
    discord_test_guild: str = ""  # Register commands in this guild only (empty = global)

    # Hunt categories
    discord_active_category: str = "Active hunts"
    discord_archive_category: str = "Archived hunts"

    # Logging
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "VENARI_",
        "env_file": ".env",
        "extra": "ignore",
        "cli_prog_name": "venari",
        "cli_kebab_case": True,
    }

    @classmethod
    def from_cli(cls, args: list[str] | None = None) -> Settings:
        """Build settings with flags from ``args``, or from ``sys.argv`` when None."""
        return cls(_cli_parse_args=True if args is None else args)

    @field_validator("discord_test_guild")
    @classmethod
    def _guild_is_snowflake(cls, value: str) -> str:
        value = value.strip()
        if value and not value.isdigit():
            msg = "VENARI_DISCORD_TEST_GUILD must be a numeric guild ID."
            raise ValueError(msg)
        return value

    @field_validator("discord_active_category", "discord_archive_category")
    @classmethod
    def _category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("category names must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            msg = f"VENARI_LOG_LEVEL must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}"
            raise ValueError(msg)
        return level

    @model_validator(mode="after")
    def _require_token(self) -> Settings:
        """The bot cannot start without a credential."""
        if not self.discord_token:
            raise ValueError("VENARI_DISCORD_TOKEN or --discord-token must be set.")
        return self

    @property
    def test_guild_id(self) -> int | None:
        """The guild commands are scoped to, or None for global registration."""
        return int(self.discord_test_guild) if self.discord_test_guild else None
