"""JSON Schema validation of generated documents."""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator


class SchemaValidator:
    def __init__(self, schema: Dict[str, Any]):
        self.schema = schema
        self.validator = Draft202012Validator(schema)

    def validate(self, data: Dict[str, Any]) -> List[str]:
        errors = []
        for err in sorted(self.validator.iter_errors(data), key=lambda e: [str(p) for p in e.path]):
            path = '.'.join([str(p) for p in err.path]) or '$root'
            errors.append(f"{path}: {err.message}")
        return errors

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)
