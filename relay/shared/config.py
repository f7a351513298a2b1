#!/usr/bin/env python3
"""
Configuration module for the chat relay.
Loads settings from an optional YAML file and initializes logging with Pydantic validation.
"""

import os
import sys
import logging
from typing import Dict, Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

CONFIG_FILE = "config.yml"
CONFIG_FILE_ENV = "RELAY_CONFIG_FILE"


class ServerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    http_log_level: str = "INFO"


class OpenRouterConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    base_url: str = "https://openrouter.ai/api/v1"
    api_key_env: str = "OPENROUTER_API_KEY"
    app_title: str = "photonn AI"


class RequestProxyConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    enabled: bool = False
    url: Optional[str] = None


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load and validate configuration with Pydantic models.

    The path defaults to $RELAY_CONFIG_FILE, then config.yml. The file is
    optional: serverless deployments run on defaults alone.
    """
    path = path or os.environ.get(CONFIG_FILE_ENV) or CONFIG_FILE
    try:
        config_data: Dict[str, Any] = {}
        if os.path.exists(path):
            with open(path, encoding="utf-8") as file:
                config_data = yaml.safe_load(file) or {}
            if not isinstance(config_data, dict):
                raise yaml.YAMLError(f"{path} must contain a mapping at the top level")

        config_data["server"] = ServerConfig(**config_data.get("server") or {}).model_dump()
        config_data["openrouter"] = OpenRouterConfig(**config_data.get("openrouter") or {}).model_dump()
        config_data["requestProxy"] = RequestProxyConfig(**config_data.get("requestProxy") or {}).model_dump()

        return config_data
    except (yaml.YAMLError, ValidationError) as e:
        print(f"Error in configuration: {e}")
        sys.exit(1)


def setup_logging(config_: Dict[str, Any]) -> logging.Logger:
    """Configure logging based on validated configuration."""
    log_level = config_["server"]["log_level"]
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level_int,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger_ = logging.getLogger("chat-relay")
    logger_.info("Logging level set to %s", log_level)
    return logger_


def get_api_key() -> Optional[str]:
    """Read the upstream credential from the environment on every call."""
    return os.environ.get(config["openrouter"]["api_key_env"]) or None


# Load and validate configuration once at startup
config = load_config()
logger = setup_logging(config)
