"""Runtime settings loaded from ``config/settings.yaml`` and the environment."""

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"


class EnvFirstSettings(BaseSettings):
    """Settings where values passed in (read from YAML) are only defaults."""

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return env_settings, dotenv_settings, init_settings, file_secret_settings


class Neo4jSettingsModel(EnvFirstSettings):
    """Connection details for Neo4j database."""

    uri: str = "neo4j://localhost:7687"
    user: str = "neo4j"
    password: str = "password"
    database: str = "neo4j"
    max_connection_lifetime: int = 3600
    max_connection_pool_size: int = 50
    connection_acquisition_timeout: float = 60.0

    model_config = SettingsConfigDict(env_prefix="NEO4J_", env_file=".env", extra="ignore")


class LoggingSettingsModel(BaseModel):
    level: str = "INFO"
    format: str = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )

    model_config = SettingsConfigDict(extra="forbid")


class RuntimeSettings(EnvFirstSettings):
    """Central runtime settings loaded from YAML and environment."""

    neo4j: Neo4jSettingsModel = Field(
        default_factory=Neo4jSettingsModel,
        description="Neo4j connection options",
    )
    logging: LoggingSettingsModel = Field(
        default_factory=LoggingSettingsModel,
        description="Log sink configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="GRAPH_TEMPLATE_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )


def load_runtime_settings(path: Optional[Union[str, Path]] = None) -> RuntimeSettings:
    """
    Load runtime settings from a YAML file and environment variables.

    If ``path`` (or ``config/settings.yaml`` when omitted) exists, its contents
    are used as defaults. ``NEO4J_*`` variables override the ``neo4j`` section
    and ``GRAPH_TEMPLATE_*`` variables (``__`` for nesting) override the rest.

    Raises:
        ValueError: If the YAML document is not a mapping or does not match the
            settings schema.
    """
    yaml_path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH
    data: dict[str, Any] = {}
    if yaml_path.exists():
        with open(yaml_path, encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Settings file {yaml_path} must contain a mapping")
    try:
        neo4j_data = data.pop("neo4j", None) or {}
        if not isinstance(neo4j_data, dict):
            raise ValueError(f"Section 'neo4j' in {yaml_path} must be a mapping")
        return RuntimeSettings(neo4j=Neo4jSettingsModel(**neo4j_data), **data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc


runtime_settings = load_runtime_settings()
