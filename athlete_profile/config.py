"""
config.py — Athlete profile builder settings.

Usage:
    from athlete_profile.config import settings
    print(settings.bio_character_limit)

Import the module-level singleton directly; never thread settings through calls.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ATHLETE_PROFILE_",
        case_sensitive=False,
        extra="ignore",  # Silently ignore any extra env vars
    )

    # --- Bio tab ---
    bio_character_limit: int = 500
    # Advisory "nearing limit" message once len(bio) >= ratio * limit
    bio_advisory_ratio: float = 0.9

    # --- Wizard defaults ---
    default_nationality: str = "Indian"
    # Stat schema shown before any sport has been selected
    default_stats_sport: str = "Badminton"

    # --- Media handles ---
    max_upload_size: int = 10 * 1024 * 1024  # 10 MB

    # --- Application ---
    app_version: str = "0.1.0"

    @property
    def bio_advisory_threshold(self) -> int:
        """Character count at which the bio advisory kicks in."""
        return int(self.bio_character_limit * self.bio_advisory_ratio)


# Module-level singleton — import this throughout the codebase
settings = Settings()
