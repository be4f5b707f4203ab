"""Write rendered graph schema documents to disk."""
from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_schema_file(document: str, output_path: str | Path) -> Path:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document + "\n", encoding='utf-8')
    logger.info(f"Graph schema written to {path}")
    return path
