"""Configuration helpers for the EcoWardrobe app."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
ITEMS_KEY = "eco-wardrobe-items-v2"
PROFILE_KEY = "eco-wardrobe-profile-v2"


@dataclass
class EcoConfig:
    """Configuration values for the EcoWardrobe app.

    Storage is a pair of key-value records (items and style profile). The
    ``storage_backend`` picks between a directory of JSON files and a single
    SQLite database.
    """

    model: str = DEFAULT_GEMINI_MODEL
    api_key: Optional[str] = None
    storage_backend: str = "json"
    storage_path: Optional[str] = None
    items_key: str = ITEMS_KEY
    profile_key: str = PROFILE_KEY
    log_level: str = "INFO"
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "EcoConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables so that the API key can
        be injected by the runtime environment.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("ECO_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        return cls(
            model=str(get_value("model", DEFAULT_GEMINI_MODEL) or DEFAULT_GEMINI_MODEL),
            api_key=get_value("google_api_key"),
            storage_backend=str(get_value("storage_backend", "json") or "json"),
            storage_path=get_value("storage_path"),
            items_key=str(get_value("items_key", ITEMS_KEY) or ITEMS_KEY),
            profile_key=str(get_value("profile_key", PROFILE_KEY) or PROFILE_KEY),
            log_level=str(get_value("log_level", "INFO") or "INFO"),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` config file."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["EcoConfig", "DEFAULT_GEMINI_MODEL", "ITEMS_KEY", "PROFILE_KEY"]
