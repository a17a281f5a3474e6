from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Any


FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_flag(raw: Any, default: bool) -> bool:
    """None keeps the default; strings such as "0", "false" or "off" are False."""
    if raw is None:
        return default
    if isinstance(raw, str):
        return raw.strip().lower() not in FALSE_VALUES
    return bool(raw)


def _env_flag(name: str, default: bool) -> bool:
    return parse_flag(os.getenv(name), default)


@dataclass(frozen=True)
class StoreConfig:
    data_root: str = "./sim_data"


def get_store_config() -> StoreConfig:
    return StoreConfig(data_root=os.getenv("SIM_DATA_ROOT", "./sim_data"))


@dataclass(frozen=True)
class ProjectionConfig:
    # legacy behaviour applies growth_rate twice (S-curve and compounding)
    compound_growth: bool = True


def get_projection_config() -> ProjectionConfig:
    return ProjectionConfig(compound_growth=_env_flag("SIM_COMPOUND_GROWTH", True))


@dataclass(frozen=True)
class LogConfig:
    level: str = "INFO"


def get_log_config() -> LogConfig:
    return LogConfig(level=os.getenv("SIM_LOG_LEVEL", "INFO"))


@dataclass(frozen=True)
class MailConfig:
    sender: str = "LEO Commerce Simulator <onboarding@resend.dev>"
    app_url: str = "http://localhost:8000"


def get_mail_config() -> MailConfig:
    return MailConfig(
        sender=os.getenv("SIM_MAIL_FROM", MailConfig.sender),
        app_url=os.getenv("SIM_APP_URL", MailConfig.app_url).rstrip("/"),
    )
