"""
Config loader and introspection options.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from core.errors import ConfigurationError


@dataclass(frozen=True)
class IntrospectionOptions:
    use_constant_ids: bool = True
    pretty_print: bool = False
    quote_tokens: bool = True

    # option name as passed by callers -> attribute
    OPTION_NAMES = {
        'useConstantIds': 'use_constant_ids',
        'prettyPrint': 'pretty_print',
        'quoteTokens': 'quote_tokens',
    }

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]]) -> "IntrospectionOptions":
        """Read ``useConstantIds``, ``prettyPrint`` and ``quoteTokens`` from ``params``.

        Unknown keys are ignored. Recognised options must be booleans.
        """
        if params is None:
            return cls()
        if not isinstance(params, Mapping):
            raise ConfigurationError(f"Introspection params must be a mapping, got {type(params).__name__}")

        values: Dict[str, bool] = {}
        for option, attr in cls.OPTION_NAMES.items():
            if option not in params:
                continue
            value = params[option]
            if not isinstance(value, bool):
                raise ConfigurationError(f"Option {option} must be a boolean, got {value!r}")
            values[attr] = value
        return cls(**values)

    def to_params(self) -> Dict[str, bool]:
        return {option: getattr(self, attr) for option, attr in self.OPTION_NAMES.items()}


class Config:
    """Load YAML config with env overlay."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        load_dotenv()
        self.data = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            raise FileNotFoundError(f"Config not found: {self.path}")
        with self.path.open('r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config root must be a mapping: {self.path}")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigurationError(f"Config section '{name}' must be a mapping")
        return section

    @property
    def neo4j(self) -> Dict[str, Any]:
        return self._section('neo4j')

    @property
    def introspection(self) -> Dict[str, Any]:
        return self._section('introspection')

    @property
    def logging(self) -> Dict[str, Any]:
        return self._section('logging')

    @property
    def neo4j_uri(self) -> str:
        return os.getenv('NEO4J_URI') or self.neo4j.get('uri', 'bolt://localhost:7687')

    @property
    def neo4j_user(self) -> str:
        return os.getenv('NEO4J_USERNAME') or self.neo4j.get('user', 'neo4j')

    @property
    def neo4j_database(self) -> Optional[str]:
        return os.getenv('NEO4J_DATABASE') or self.neo4j.get('database')

    def resolve_password(self) -> str | None:
        env_key = self.neo4j.get('password_env')
        if env_key and os.getenv(env_key):
            return os.getenv(env_key)
        return os.getenv('NEO4J_PASSWORD') or self.neo4j.get('password')

    def introspection_options(self) -> IntrospectionOptions:
        return IntrospectionOptions.from_params(self.introspection)
