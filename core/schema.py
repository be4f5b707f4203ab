"""
JSON Schema of the graph schema representation document.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

DEFAULT_SCHEMA_PATH = Path(__file__).with_name('graph_schema.json')


class SchemaLoader:
    def __init__(self, schema_path: str | Path = DEFAULT_SCHEMA_PATH):
        self.schema_path = Path(schema_path)
        self.schema = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {self.schema_path}")
        return json.loads(self.schema_path.read_text(encoding='utf-8'))

    def get_definition(self, name: str) -> Dict[str, Any]:
        return self.schema.get('$defs', {}).get(name, {})
