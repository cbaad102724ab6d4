"""
Configuration - Environment-driven settings.

A `.env` file in the working directory is loaded first if present.

Variables:
    HOST                         Bind address for `slotwatch serve` (0.0.0.0)
    PORT                         Webhook port (3000)
    LOG_LEVEL                    Root log level (INFO)
    LOG_DIRECTORY                Where combined.log / error.log go (./logs)
    SLOTWATCH_SEED               Seed for initial attributions (unset = random)
    SLOTWATCH_SUMMARY_INTERVAL   Game seconds between summaries (60)
    HIGHLIGHTS_ENABLED           Send highlight requests (true)
"""

from __future__ import annotations
from dataclasses import dataclass
import os

from dotenv import find_dotenv, load_dotenv


def _flag(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    """Service settings."""
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_directory: str = "./logs"
    seed: int | None = None
    summary_interval: float = 60.0
    highlights_enabled: bool = True

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv(find_dotenv(usecwd=True))
        seed = os.getenv("SLOTWATCH_SEED")
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_directory=os.getenv("LOG_DIRECTORY", "./logs"),
            seed=int(seed) if seed else None,
            summary_interval=float(os.getenv("SLOTWATCH_SUMMARY_INTERVAL", "60")),
            highlights_enabled=_flag(os.getenv("HIGHLIGHTS_ENABLED"), True),
        )
