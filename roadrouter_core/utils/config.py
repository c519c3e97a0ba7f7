"""Configuration utilities.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from roadrouter_core.middleware.cors import CORSConfig

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="RouterConfig")


@dataclass
class RouterConfig:
    """Router configuration."""

    # Routing
    basepath: str = ""
    case_sensitive: bool = True

    # Logging
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    # CORS
    cors_enabled: bool = True
    cors_origins: List[Any] = field(default_factory=list)
    cors_allowed_headers: List[str] = field(
        default_factory=lambda: ["Content-Type", "Authorization", "X-Requested-With"]
    )
    cors_max_age: int = 86400
    cors_supports_credentials: bool = False

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        """Create config from dictionary."""
        # Filter to only valid fields
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in (data or {}).items() if k in valid_fields}
        return cls(**filtered)

    @classmethod
    def from_json(cls: Type[T], path: str) -> T:
        """Load config from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_yaml(cls: Type[T], path: str) -> T:
        """Load config from YAML file."""
        try:
            import yaml
        except ImportError as e:
            raise ImportError("PyYAML required for YAML config") from e
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    @classmethod
    def from_env(cls: Type[T], prefix: str = "ROUTER_") -> T:
        """Load config from environment variables.

        List fields take comma-separated values
        (``ROUTER_CORS_ORIGINS=https://a.io,https://b.io``).
        """
        data: Dict[str, Any] = {}
        list_fields = {"cors_origins", "cors_allowed_headers"}

        for key, value in os.environ.items():
            if not key.startswith(prefix):
                continue
            config_key = key[len(prefix):].lower()

            # Type conversion
            if config_key in list_fields:
                data[config_key] = [v.strip() for v in value.split(",") if v.strip()]
            elif value.lower() in ("true", "false"):
                data[config_key] = value.lower() == "true"
            elif value.isdigit():
                data[config_key] = int(value)
            else:
                data[config_key] = value

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {}
        for field_name in self.__dataclass_fields__:
            result[field_name] = getattr(self, field_name)
        return result

    def merge(self, other: Dict[str, Any]) -> "RouterConfig":
        """Merge with overrides (overrides take precedence)."""
        data = self.to_dict()
        data.update(other)
        return type(self).from_dict(data)

    def build_cors(self) -> Optional[CORSConfig]:
        """Build the CORS configuration, None when disabled or empty."""
        if not self.cors_enabled or not self.cors_origins:
            return None
        return CORSConfig.from_dict({
            "allowed_headers": self.cors_allowed_headers,
            "max_age": self.cors_max_age,
            "supports_credentials": self.cors_supports_credentials,
            "origins": self.cors_origins,
        })

    def configure_logging(self) -> None:
        """Apply log level and format to the root logger."""
        configure_logging(self.log_level, self.log_format)


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Set up root logging for an application using the router."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=fmt or RouterConfig.log_format,
    )


def load_config(
    path: Optional[str] = None,
    env_prefix: str = "ROUTER_",
) -> RouterConfig:
    """Load configuration from multiple sources.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (if provided)
    3. Defaults
    """
    config = RouterConfig()

    # Load from file if provided
    if path:
        path_obj = Path(path)
        if path_obj.exists():
            if path.endswith(".json"):
                config = RouterConfig.from_json(path)
            elif path.endswith((".yaml", ".yml")):
                config = RouterConfig.from_yaml(path)
            else:
                logger.warning(f"Unknown config format: {path}")
        else:
            logger.warning(f"Config file not found: {path}")

    # Override with environment variables that are actually set
    overrides = {
        name: value
        for name, value in RouterConfig.from_env(env_prefix).to_dict().items()
        if f"{env_prefix}{name.upper()}" in os.environ
    }
    return config.merge(overrides)


__all__ = [
    "RouterConfig",
    "configure_logging",
    "load_config",
]
