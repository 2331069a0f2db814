"""Service configuration read from a YAML file, with environment overrides."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

_CONFIG_NAME = "config"
_SEARCH_EXTENSIONS = (
    "json", "toml", "yaml", "yml", "properties", "props", "prop",
    "hcl", "tfvars", "dotenv", "env", "ini",
)
_SECTIONS = ("server", "database", "redis", "jwt", "hospital_service")
_DATABASE_KEYS = ("host", "port", "user", "password", "dbname", "sslmode")
_REDIS_TEXT_KEYS = ("addr", "password")
_JWT_KEYS = ("private_key", "public_key", "access_token_expiry", "refresh_token_expiry")


class ConfigError(Exception):
    """Raised when the configuration cannot be read or decoded."""


def _as_str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ConfigError(f"error unmarshalling config: {key!r} must be a scalar")


def _as_int(value: Any, key: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        if value == "":
            return 0
        try:
            return int(value, 0)
        except ValueError:
            pass
    raise ConfigError(f"error unmarshalling config: {key!r} must be an integer")


def _section(data: Mapping[str, Any], name: str) -> dict[str, Any]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"error unmarshalling config: {name!r} must be a mapping")
    return {str(key).lower(): item for key, item in value.items()}


@dataclass
class ServerConfig:
    port: str = ""


@dataclass
class DatabaseConfig:
    host: str = ""
    port: str = ""
    user: str = ""
    password: str = ""
    dbname: str = ""
    sslmode: str = ""

    def dsn(self) -> str:
        """Return the key=value connection string for this database."""
        return (
            f"host={self.host} user={self.user} password={self.password} "
            f"dbname={self.dbname} port={self.port} sslmode={self.sslmode}"
        )


@dataclass
class RedisConfig:
    addr: str = ""
    password: str = ""
    db: int = 0


@dataclass
class JWTConfig:
    private_key: str = ""
    public_key: str = ""
    access_token_expiry: str = ""
    refresh_token_expiry: str = ""


@dataclass
class HospitalServiceConfig:
    base_url: str = ""


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    jwt: JWTConfig = field(default_factory=JWTConfig)
    hospital_service: HospitalServiceConfig = field(default_factory=HospitalServiceConfig)

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Decode a configuration mapping; keys are case-insensitive, scalars coerced."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError("error unmarshalling config: top level must be a mapping")
        data = {str(key).lower(): value for key, value in data.items()}

        server = _section(data, "server")
        database = _section(data, "database")
        redis = _section(data, "redis")
        jwt = _section(data, "jwt")
        hospital = _section(data, "hospital_service")

        def text(section: Mapping[str, Any], prefix: str, key: str) -> str:
            return _as_str(section.get(key), f"{prefix}.{key}")

        database_values = {key: text(database, "database", key) for key in _DATABASE_KEYS}
        jwt_values = {key: text(jwt, "jwt", key) for key in _JWT_KEYS}
        redis_values = {key: text(redis, "redis", key) for key in _REDIS_TEXT_KEYS}

        return cls(
            server=ServerConfig(port=text(server, "server", "port")),
            database=DatabaseConfig(**database_values),
            redis=RedisConfig(
                **redis_values,
                db=_as_int(redis.get("db"), "redis.db"),
            ),
            jwt=JWTConfig(**jwt_values),
            hospital_service=HospitalServiceConfig(
                base_url=text(hospital, "hospital_service", "base_url")
            ),
        )


def _find_config_file(directory: Path) -> Path | None:
    for extension in _SEARCH_EXTENSIONS:
        candidate = directory / f"{_CONFIG_NAME}.{extension}"
        if candidate.is_file():
            return candidate
    return None


def _apply_environment(data: dict[str, Any]) -> None:
    """Override every key present in the file by an environment variable of its dotted name."""
    for section_name, section in data.items():
        if not isinstance(section, dict):
            env_value = os.environ.get(section_name.upper())
            if env_value is not None:
                data[section_name] = env_value
            continue
        for key in section:
            env_value = os.environ.get(f"{section_name}.{key}".upper())
            if env_value is not None:
                section[key] = env_value


def load_config(path: str | os.PathLike[str]) -> Config:
    """Load ``config.*`` (parsed as YAML) from the directory *path*."""
    directory = Path(path)
    config_file = _find_config_file(directory)
    if config_file is None:
        raise ConfigError(
            f'error reading config file: Config File "{_CONFIG_NAME}" Not Found in "[{directory}]"'
        )
    try:
        raw = yaml.safe_load(config_file.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"error reading config file: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError("error reading config file: top level must be a mapping")

    data: dict[str, Any] = {}
    for key, value in raw.items():
        name = str(key).lower()
        if isinstance(value, Mapping):
            data[name] = {str(k).lower(): v for k, v in value.items()}
        else:
            data[name] = value
    _apply_environment(data)
    return Config.from_dict(data)