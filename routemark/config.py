"""
Config system - layered typed configuration for Setup.

Merge order (later overrides earlier):
1. Dataclass defaults
2. Config file (YAML or JSON)
3. .env file
4. Environment variables (RM_* prefix, RM_SECTION__FIELD for sections)
5. Manual overrides
"""

from __future__ import annotations

from dataclasses import dataclass, fields, MISSING
from pathlib import Path
from typing import Any, Dict, Optional, get_args, get_origin, get_type_hints
import importlib
import json
import os
import types

from dotenv import dotenv_values

from .faults.exceptions import ConfigError


@dataclass
class RoutemarkConfig:
    """
    Settings for ``Setup.from_config``.

    ``package`` is a shortcut that fills any of the three scan packages left
    empty.
    """
    package: Optional[str] = None
    controller_package: Optional[str] = None
    filter_package: Optional[str] = None
    websocket_package: Optional[str] = None
    max_threads: int = 8
    min_threads: int = 2
    idle_timeout_ms: int = 30000
    template_engine: Optional[str] = "routemark.templates:Jinja2TemplateEngine"
    main_template: Optional[str] = "main.html"
    expose_error_stack: bool = True
    host: str = "127.0.0.1"
    port: int = 4567
    log_level: str = "info"

    def __post_init__(self):
        if self.package:
            self.controller_package = self.controller_package or self.package
            self.filter_package = self.filter_package or self.package
            self.websocket_package = self.websocket_package or self.package
        if self.max_threads < 1:
            raise ConfigError("max_threads must be at least 1")
        if not 0 <= self.min_threads <= self.max_threads:
            raise ConfigError("min_threads must be between 0 and max_threads")
        if self.idle_timeout_ms < 0:
            raise ConfigError("idle_timeout_ms must not be negative")


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Example:
        config = ConfigLoader.load("routemark.yaml", env_file=".env").build()
        Setup().from_config(config)
    """

    def __init__(self, env_prefix: str = "RM_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        path: Optional[str] = None,
        env_prefix: str = "RM_",
        env_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ConfigLoader":
        loader = cls(env_prefix=env_prefix)

        if path:
            loader._load_file(Path(path))

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env()

        if overrides:
            loader._merge_dict(loader.config_data, overrides)

        return loader

    def _load_file(self, path: Path):
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        if path.suffix == ".json":
            with open(path) as f:
                data = json.load(f)
        elif path.suffix in (".yaml", ".yml"):
            import yaml
            with open(path) as f:
                data = yaml.safe_load(f)
        else:
            raise ConfigError(f"Unsupported config file type: {path.suffix}")
        if data:
            if not isinstance(data, dict):
                raise ConfigError(f"Config file {path} must contain a mapping")
            self._merge_dict(self.config_data, data)

    def _load_env_file(self, path: str):
        """Load RM_* entries from a .env file."""
        if not Path(path).exists():
            return
        for key, value in dotenv_values(path).items():
            if value is not None and key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _load_from_env(self):
        for key, value in os.environ.items():
            if key.startswith(self.env_prefix):
                self._set_nested(key, value)

    def _set_nested(self, key: str, value: str):
        """Convert RM_SECTION__KEY to nested dict entries."""
        key = key[len(self.env_prefix):]
        parts = key.lower().split("__")

        current = self.config_data
        for part in parts[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[parts[-1]] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def _merge_dict(self, target: dict, source: dict):
        """Deep merge source into target."""
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._merge_dict(target[key], value)
            else:
                target[key] = value

    def get(self, path: str, default: Any = None) -> Any:
        """Get config value by dot-separated path."""
        current = self.config_data
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return default
        return current

    def _flatten(self) -> Dict[str, Any]:
        """
        Collapse sections into top-level fields.

        ``server: {port: 80}`` (or ``RM_SERVER__PORT=80``) sets ``port``. A
        top-level key wins over the same field inside a section.

        Raises:
            ConfigError: A section holds a key that is not a config field
        """
        names = {field_info.name for field_info in fields(RoutemarkConfig)}
        flat: Dict[str, Any] = {}
        for key, value in self.config_data.items():
            if key in names or not isinstance(value, dict):
                continue
            for sub_key, sub_value in value.items():
                if sub_key not in names:
                    raise ConfigError(f"Unknown config field '{key}.{sub_key}'")
                flat[sub_key] = sub_value
        for key, value in self.config_data.items():
            if key in names:
                flat[key] = value
        return flat

    def build(self) -> RoutemarkConfig:
        """Instantiate and validate a RoutemarkConfig."""
        hints = get_type_hints(RoutemarkConfig)
        data = self._flatten()
        kwargs = {}
        for field_info in fields(RoutemarkConfig):
            name = field_info.name
            if name in data:
                value = data[name]
                if not self._check_type(value, hints[name]):
                    raise ConfigError(
                        f"Config field '{name}' expected {hints[name]}, "
                        f"got {type(value).__name__}"
                    )
                kwargs[name] = value
            elif field_info.default is MISSING and field_info.default_factory is MISSING:
                raise ConfigError(f"Required config field '{name}' not provided")
        return RoutemarkConfig(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin is types.UnionType or str(origin) == 'typing.Union':
            if value is None:
                return True
            args = [a for a in get_args(expected_type) if a is not type(None)]
            return any(self._check_type(value, a) for a in args)

        if expected_type is bool:
            return isinstance(value, bool)
        if expected_type is int:
            return isinstance(value, int) and not isinstance(value, bool)
        if expected_type is str:
            return isinstance(value, str)

        try:
            return isinstance(value, expected_type)
        except TypeError:
            return True

    def to_dict(self) -> dict:
        return self.config_data.copy()


def load_object(path: str) -> Any:
    """
    Import an object from ``"package.module:Name"`` (or ``"package.module.Name"``).

    Raises:
        ConfigError: The module or attribute cannot be found
    """
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ConfigError(f"Invalid object path '{path}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import module '{module_name}': {exc}") from exc

    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise ConfigError(f"'{module_name}' has no attribute '{attr}'") from exc
    return obj
