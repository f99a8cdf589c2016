import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False
    LOG_LEVEL: str = "INFO"

    # Usage gating (percent of plan limit)
    USAGE_WARNING_THRESHOLD: float = 80.0
    USAGE_BLOCK_THRESHOLD: float = 100.0

    # Usage-driven upgrade suggestions (percent of plan limit)
    UPGRADE_SUGGESTION_THRESHOLD: float = 80.0
    UPGRADE_HIGH_URGENCY_THRESHOLD: float = 95.0

    # App
    APP_TITLE: str = "tierscore"
    CORS_ALLOWED_ORIGINS: str = "http://localhost:3000"  # comma-separated

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]


settings = Settings()


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate soft configuration expectations.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("tierscore")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    problems = []
    if getattr(cfg, "ENV", "development").lower() == "production" and "*" in getattr(cfg, "CORS_ALLOWED_ORIGINS", ""):
        problems.append("CORS_ALLOWED_ORIGINS should not be '*' in production")
    if not isinstance(logging.getLevelName(getattr(cfg, "LOG_LEVEL", "INFO").upper()), int):
        problems.append(f"Unknown LOG_LEVEL: {cfg.LOG_LEVEL}")

    if problems:
        message = "; ".join(problems)
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
