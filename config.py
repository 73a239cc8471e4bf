# config.py

import os
import yaml
import logging
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"
MAX_REPO_PATHS = 100


class ConfigError(Exception):
    pass


class Settings(BaseModel):
    webhook_secret: str
    host: str = "0.0.0.0"
    port: int = 8080
    repo_paths: List[str] = Field(default_factory=list)
    git_path: str = "git"
    sync_timeout: float = 300
    debug: bool = False
    log_db_path: Optional[str] = None

    @field_validator("webhook_secret")
    @classmethod
    def secret_required(cls, value: str) -> str:
        if not value:
            raise ValueError("webhook secret is required")
        return value

    @field_validator("port")
    @classmethod
    def port_in_range(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"port {value} is out of range")
        return value

    @field_validator("sync_timeout")
    @classmethod
    def timeout_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("sync_timeout must be positive")
        return value


def load_config(config_path: str, required: bool = True) -> dict:
    """
    Load configuration from a YAML file.

    Returns:
        dict: Parsed configuration dictionary ({} when the file is absent and not required).
    """
    if not os.path.exists(config_path):
        if required:
            logger.error(f"Configuration file '{config_path}' not found.")
            raise ConfigError(f"Configuration file '{config_path}' not found.")
        logger.info(f"No configuration file at '{config_path}'; using environment only.")
        return {}

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Error parsing YAML file '{config_path}': {e}")
        raise ConfigError(f"Error parsing YAML file '{config_path}': {e}")

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration file '{config_path}' must contain a mapping.")
    logger.info(f"Configuration loaded successfully from '{config_path}'.")
    return config


def repo_paths_from_env(environ: Mapping[str, str], limit: int = MAX_REPO_PATHS) -> List[str]:
    """
    Collects REPO_PATH0, REPO_PATH1, ... in order. The first missing or empty
    index ends the scan, so REPO_PATH2 is ignored when REPO_PATH1 is unset.
    """
    paths = []
    for i in range(limit):
        path = environ.get(f"REPO_PATH{i}", "")
        if not path:
            break
        paths.append(path)
    return paths


def _env_overrides(environ: Mapping[str, str]) -> dict:
    overrides = {}
    simple = {
        "SECRET": "webhook_secret",
        "HOST": "host",
        "PORT": "port",
        "GIT_PATH": "git_path",
        "SYNC_TIMEOUT": "sync_timeout",
        "LOG_DB_PATH": "log_db_path",
    }
    for env_name, key in simple.items():
        if environ.get(env_name):
            overrides[key] = environ[env_name]

    if environ.get("DEBUG"):
        overrides["debug"] = environ["DEBUG"].lower() in ("1", "true", "yes")

    paths = repo_paths_from_env(environ)
    if paths:
        overrides["repo_paths"] = paths
    return overrides


def build_settings(config_path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Resolves the service settings: .env file, then the YAML file, then
    environment variables (environment wins).
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    explicit_path = config_path or environ.get("CONFIG_PATH")
    config = load_config(explicit_path or DEFAULT_CONFIG_PATH, required=bool(explicit_path))
    config.update(_env_overrides(environ))

    try:
        settings = Settings(**config)
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        raise ConfigError(f"Invalid configuration: {e}")

    # Log summary of key settings (without sensitive details)
    logger.info(f"Listening on: {settings.host}:{settings.port}")
    logger.info(f"Repositories configured: {len(settings.repo_paths)}")
    logger.info(f"Sync timeout: {settings.sync_timeout}s")
    return settings
