"""Configuration model for the debugging proxy."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from os import PathLike
from typing import Any

import yaml

_OPTIONAL_TEXT_FIELDS = ("host_v6", "api_key", "ssl_cert", "ssl_key")


class ConfigError(ValueError):
    """Raised when the configuration is malformed or inconsistent."""


def _required(data: Mapping[str, Any], key: str, where: str) -> Any:
    value = data.get(key)
    if value is None:
        raise ConfigError(f"missing field `{key}` in {where}")
    return value


def _string(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"`{name}` must be a string, got {value!r}")
    return value


def _optional_string(value: Any, name: str) -> str | None:
    return None if value is None else _string(value, name)


def _port(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 65535:
        raise ConfigError(f"`{name}` must be a port number between 0 and 65535, got {value!r}")
    return value


def _optional_port(value: Any, name: str) -> int | None:
    return None if value is None else _port(value, name)


def _mapping(value: Any, name: str) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"`{name}` must be a mapping")
    return value


@dataclass(frozen=True)
class ServerConfig:
    """Where the proxy listens, plus optional extras carried by the config file."""

    host: str
    port: int
    host_v6: str | None = None
    port_v6: int | None = None
    api_key: str | None = None
    ssl_cert: str | None = None
    ssl_key: str | None = None


@dataclass(frozen=True)
class Config:
    """The whole proxy configuration."""

    server: ServerConfig
    upstreams: dict[str, str] = field(default_factory=dict)
    default_upstream: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        """Build a configuration from parsed YAML/JSON data."""
        data = _mapping(data, "configuration")

        server_data = _mapping(_required(data, "server", "configuration"), "server")
        optional_text = {
            name: _optional_string(server_data.get(name), name)
            for name in _OPTIONAL_TEXT_FIELDS
        }
        server = ServerConfig(
            host=_string(_required(server_data, "host", "server"), "host"),
            port=_port(_required(server_data, "port", "server"), "port"),
            port_v6=_optional_port(server_data.get("port_v6"), "port_v6"),
            **optional_text,
        )

        upstream_data = _mapping(_required(data, "upstreams", "configuration"), "upstreams")
        upstreams = {
            _string(name, "upstream name"): _string(url, f"upstreams.{name}")
            for name, url in upstream_data.items()
        }

        default_upstream = _optional_string(data.get("default_upstream"), "default_upstream")
        return cls(server=server, upstreams=upstreams, default_upstream=default_upstream)

    def validate(self) -> None:
        """Check that requests can always be routed to some upstream."""
        if not self.upstreams:
            raise ConfigError("No upstreams defined")
        if len(self.upstreams) > 1:
            if self.default_upstream is None:
                raise ConfigError("Default upstream is not defined")
            if self.default_upstream not in self.upstreams:
                available = ", ".join(f'"{name}"' for name in self.upstreams)
                raise ConfigError(
                    f'Default upstream "{self.default_upstream}" doesn\'t match '
                    f"to any of upstreams ({available})"
                )


def load_config(path: str | PathLike[str]) -> Config:
    """Read a YAML configuration file."""
    with open(path, encoding="utf-8") as stream:
        try:
            data = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            raise ConfigError(f"invalid YAML in {path}: {exc}") from exc
    return Config.from_dict(data)