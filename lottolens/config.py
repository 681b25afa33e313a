"""
LottoLens Configuration
=======================

Settings are read from config/config.ini and may be overridden with
LOTTOLENS_* environment variables (a .env file is loaded by the
entrypoints when python-dotenv is installed).
"""

import configparser
import os
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

DEFAULT_CONFIG_PATH = os.path.join("config", "config.ini")


class Settings(BaseModel):
    data_source: str = os.path.join("data", "draws.json")
    fetch_timeout: float = Field(15.0, gt=0)
    recency_window_days: int = 14
    query_width: int = Field(3, ge=1)
    number_width: Optional[int] = Field(4, ge=1)
    threshold: float = Field(0.45, ge=0.0, le=1.0)
    top_n: int = Field(4, ge=1)


# env var -> (settings field, converter)
ENV_OVERRIDES = {
    "LOTTOLENS_DATA_SOURCE": ("data_source", str),
    "LOTTOLENS_FETCH_TIMEOUT": ("fetch_timeout", float),
    "LOTTOLENS_RECENCY_WINDOW_DAYS": ("recency_window_days", int),
    "LOTTOLENS_QUERY_WIDTH": ("query_width", int),
    "LOTTOLENS_NUMBER_WIDTH": ("number_width", int),
    "LOTTOLENS_THRESHOLD": ("threshold", float),
    "LOTTOLENS_TOP_N": ("top_n", int),
}


def _candidate_paths(config_path: Optional[str]) -> List[str]:
    paths = []
    if config_path:
        paths.append(config_path)
    paths.extend([
        os.path.join(os.path.dirname(__file__), "..", "config", "config.ini"),
        os.path.join(os.getcwd(), DEFAULT_CONFIG_PATH),
    ])
    return paths


def _read_ini(config_path: Optional[str]) -> Dict[str, str]:
    config = configparser.ConfigParser()
    paths_to_try = _candidate_paths(config_path)

    for path in paths_to_try:
        if os.path.exists(path):
            config.read(path)
            logger.info(f"Configuration loaded from: {path}")
            break
    else:
        logger.warning(f"Config file not found. Tried paths: {paths_to_try}")
        return {}

    values: Dict[str, str] = {}
    if config.has_section("data"):
        values["data_source"] = config.get("data", "source", fallback=Settings().data_source)
        values["fetch_timeout"] = config.get("data", "fetch_timeout", fallback="15")
    if config.has_section("analysis"):
        for option in ("recency_window_days", "query_width", "number_width", "threshold", "top_n"):
            if config.has_option("analysis", option):
                values[option] = config.get("analysis", option)
    return values


def _disables_padding(raw) -> bool:
    return str(raw).strip().lower() in ("0", "none")


def _accept(values: Dict[str, object], field_name: str, value, source: str) -> None:
    """Store value only if Settings accepts it on its own"""
    try:
        Settings(**{field_name: value})
    except ValidationError as e:
        logger.warning(f"Ignoring invalid {source}={value!r}: {e.errors()[0]['msg']}")
        return
    values[field_name] = value


def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Build settings from the ini file and environment overrides.

    Values that fail validation are ignored with a warning, keeping the
    previous (file or default) value.

    Args:
        config_path: Explicit ini path, tried before the default locations

    Returns:
        Settings
    """
    values: Dict[str, object] = {}
    for field_name, raw in _read_ini(config_path).items():
        # number_width = 0 or "none" disables number padding
        if field_name == "number_width" and _disables_padding(raw):
            raw = None
        _accept(values, field_name, raw, f"config value {field_name}")

    for env_name, (field_name, convert) in ENV_OVERRIDES.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        if field_name == "number_width" and _disables_padding(raw):
            values[field_name] = None
            continue
        try:
            converted = convert(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid {env_name}={raw!r}")
            continue
        _accept(values, field_name, converted, env_name)

    settings = Settings(**values)
    logger.debug(f"Settings resolved: {settings.model_dump()}")
    return settings
