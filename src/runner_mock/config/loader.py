"""Configuration loader."""

import logging
import os
import re
import typing
from dataclasses import fields, is_dataclass
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from runner_mock.errors import create_error
from runner_mock.types import LogFormat, LogLevel, ValidationIssue, ValidationResult

from .models import MockServiceConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RUNNER_MOCK_CONFIG"
DEFAULT_CONFIG_FILE = "runner-mock.yaml"

_SECTIONS = {"server", "auth", "logging", "registry", "release"}

# (section, key, may be null)
_STRING_FIELDS = (
    ("server", "host", False),
    ("server", "api_version", False),
    ("logging", "file", True),
    ("registry", "runner_os", False),
    ("release", "version", False),
    ("release", "documentation_url", False),
)


def resolve_env_vars(value: str) -> str:
    """Resolve environment variable references in string.

    Supports:
    - ${VAR} - Required, error if not set
    - ${VAR:-default} - With default value
    - ${VAR:?error message} - Required with custom error

    Raises:
        MockServiceError: If a required variable is not set
    """
    pattern = r"\$\{([^}:]+)(?::([?-])([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        operator = match.group(2)  # '-' or '?' or None
        operand = match.group(3)

        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value

        if operator == "-":
            return operand or ""
        if operator == "?":
            error_msg = operand or f"Required environment variable {var_name} not set"
            raise create_error("CONFIG_INVALID", detail=error_msg)
        raise create_error(
            "CONFIG_INVALID",
            detail=f"Required environment variable {var_name} not set",
        )

    return re.sub(pattern, replacer, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve env vars in data structure."""
    if isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    if isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    if isinstance(data, str):
        return resolve_env_vars(data)
    return data


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries; values from override win."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _coerce_dates(data: dict[str, Any]) -> dict[str, Any]:
    """Turn an unquoted YAML date in server.api_version back into its text."""
    server = data.get("server")
    if isinstance(server, dict) and isinstance(server.get("api_version"), date):
        return deep_merge(data, {"server": {"api_version": server["api_version"].isoformat()}})
    return data


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _enum_values(enum_type: type[Enum]) -> set[str]:
    return {member.value.lower() for member in enum_type}


class ConfigLoader:
    """Load and validate service configuration."""

    def load(
        self,
        path: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> MockServiceConfig:
        """Load configuration from file, then apply overrides.

        Resolution order if path not specified:
        1. RUNNER_MOCK_CONFIG environment variable
        2. ./runner-mock.yaml
        3. Built-in defaults

        An explicitly given path that does not exist is an error.

        Args:
            path: Optional path to config file
            overrides: Nested dict applied on top of the file (CLI flags)

        Raises:
            MockServiceError: If the file is missing, unreadable or invalid
        """
        explicit = path is not None
        if path is None:
            path = self._resolve_config_path()

        data: dict[str, Any] = {}
        config_path: Path | None = None

        if path is not None:
            config_path = Path(path)
            if config_path.exists():
                data = self._read_yaml(config_path)
            elif explicit:
                raise create_error(
                    "CONFIG_INVALID",
                    detail=f"Configuration file not found: {config_path}",
                )
            else:
                config_path = None

        if config_path is None:
            logger.debug("No config file found, using default configuration")

        if overrides:
            data = deep_merge(data, overrides)

        return self.load_from_dict(data)

    def load_from_dict(self, data: dict[str, Any]) -> MockServiceConfig:
        """Load configuration from dictionary.

        Raises:
            MockServiceError: If configuration is invalid
        """
        data = _coerce_dates(data)
        validation = self.validate(data)
        for warning in validation.warnings:
            logger.warning("%s: %s", warning.path, warning.message)
        if not validation.valid:
            error_messages = [f"- {issue.path}: {issue.message}" for issue in validation.errors]
            raise create_error(
                "CONFIG_INVALID",
                detail="Configuration validation failed:\n" + "\n".join(error_messages),
            )

        try:
            config = self._convert_field(MockServiceConfig, data)
        except (TypeError, ValueError) as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Failed to parse configuration: {e}",
                cause=e,
            ) from e

        return config

    def validate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate config data without loading."""
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for key in data:
            if key not in _SECTIONS:
                warnings.append(
                    ValidationIssue(
                        path=key,
                        message=f"Unknown configuration key: {key}",
                        severity="warning",
                    )
                )

        for section in _SECTIONS:
            if section in data and not isinstance(data[section], dict):
                errors.append(
                    ValidationIssue(path=section, message=f"{section} must be a dictionary")
                )

        server = data.get("server")
        if isinstance(server, dict):
            if "port" in server:
                port = server["port"]
                if not _is_int(port) or not 0 <= port <= 65535:
                    errors.append(
                        ValidationIssue(
                            path="server.port",
                            message="port must be an integer between 0 and 65535",
                        )
                    )
            if "poll_interval" in server:
                interval = server["poll_interval"]
                is_number = isinstance(interval, int | float) and not isinstance(interval, bool)
                if not is_number or interval <= 0:
                    errors.append(
                        ValidationIssue(
                            path="server.poll_interval",
                            message="poll_interval must be a positive number",
                        )
                    )

        auth = data.get("auth")
        if isinstance(auth, dict) and "enabled" in auth and not isinstance(auth["enabled"], bool):
            errors.append(ValidationIssue(path="auth.enabled", message="enabled must be a boolean"))

        log_section = data.get("logging")
        if isinstance(log_section, dict):
            for key, enum_type in (("level", LogLevel), ("format", LogFormat)):
                if key in log_section:
                    value = log_section[key]
                    if not isinstance(value, str) or value.lower() not in _enum_values(enum_type):
                        allowed = ", ".join(sorted(_enum_values(enum_type)))
                        errors.append(
                            ValidationIssue(
                                path=f"logging.{key}",
                                message=f"{key} must be one of: {allowed}",
                            )
                        )

        registry = data.get("registry")
        if isinstance(registry, dict):
            id_min = registry.get("id_min", 1000)
            id_max = registry.get("id_max", 99999)
            if not _is_int(id_min) or not _is_int(id_max) or id_min > id_max:
                errors.append(
                    ValidationIssue(
                        path="registry",
                        message="id_min and id_max must be integers with id_min <= id_max",
                    )
                )

        for section, key, optional in _STRING_FIELDS:
            values = data.get(section)
            if not isinstance(values, dict) or key not in values:
                continue
            value = values[key]
            if value is None and optional:
                continue
            if not isinstance(value, str):
                errors.append(
                    ValidationIssue(
                        path=f"{section}.{key}",
                        message=f"{key} must be a string (quote it in YAML)",
                    )
                )

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def _read_yaml(self, config_path: Path) -> dict[str, Any]:
        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Invalid YAML in config file: {e}",
                cause=e,
            ) from e
        except OSError as e:
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Cannot read config file {config_path}: {e}",
                cause=e,
            ) from e

        if not isinstance(data, dict):
            raise create_error(
                "CONFIG_INVALID",
                detail=f"Config file {config_path} must contain a mapping",
            )

        return _resolve_env_vars_recursive(data)

    def _resolve_config_path(self) -> Path | None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if env_path:
            return Path(env_path)

        local_path = Path(DEFAULT_CONFIG_FILE)
        if local_path.exists():
            return local_path

        return None

    def _convert_field(self, field_type: Any, value: Any) -> Any:
        """Convert a raw YAML value to the declared field type."""
        if value is None:
            return None

        origin = typing.get_origin(field_type)

        if origin is list:
            if not isinstance(value, list):
                return value
            args = typing.get_args(field_type)
            if args:
                return [self._convert_field(args[0], item) for item in value]
            return value

        if is_dataclass(field_type):
            if not isinstance(value, dict):
                return value
            kwargs = {}
            for f in fields(field_type):
                if f.name in value:
                    kwargs[f.name] = self._convert_field(f.type, value[f.name])
            return field_type(**kwargs)

        if isinstance(field_type, type) and issubclass(field_type, Enum):
            if isinstance(value, str):
                for member in field_type:
                    if member.value.lower() == value.lower():
                        return member
                return field_type(value)
            return value

        return value


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> MockServiceConfig:
    """Convenience function to load config."""
    return ConfigLoader().load(path, overrides)
