"""Exceptions raised while introspecting a graph schema."""
from __future__ import annotations


class IntrospectionError(Exception):
    """Base class for every failure of an introspection call."""


class ConfigurationError(IntrospectionError):
    """An option or config file value is malformed or has the wrong type."""


class DataAccessError(IntrospectionError):
    """Listing tokens or reading a property table from the graph failed."""


class InconsistentSchemaError(IntrospectionError):
    """A property row references a label or type missing from the token tables."""
