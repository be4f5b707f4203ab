"""Token tables for node labels and relationship types."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, Iterator, Optional

from core.errors import DataAccessError
from core.model import Token

logger = logging.getLogger(__name__)

Sanitizer = Callable[[str], Optional[str]]


def _read_names(names: Iterable[str]) -> Iterator[str]:
    """Iterate ``names``, reporting failures of the source as DataAccessError."""
    try:
        iterator = iter(names)
    except Exception as exc:
        raise DataAccessError(f"Failed to read tokens in use: {exc}") from exc
    while True:
        try:
            name = next(iterator)
        except StopIteration:
            return
        except DataAccessError:
            raise
        except Exception as exc:
            raise DataAccessError(f"Failed to read tokens in use: {exc}") from exc
        yield name


def build_tokens(
    names: Iterable[str],
    id_generator: Callable[[str], str],
    quote_tokens: bool = True,
    sanitizer: Optional[Sanitizer] = None,
) -> Dict[str, Token]:
    """Create one token per distinct name, keyed by the raw name.

    ``names`` is consumed once. If it has a ``close`` method (a generator
    holding a database session, for instance) it is called before returning,
    also when iterating fails.
    """
    tokens: Dict[str, Token] = {}
    try:
        for name in _read_names(names):
            if name in tokens:
                continue
            value = name
            if quote_tokens and sanitizer is not None:
                sanitized = sanitizer(name)
                if sanitized is None:
                    logger.debug(f"Could not sanitize token {name!r}, using it verbatim")
                else:
                    value = sanitized
            tokens[name] = Token(id_generator(name), value)
    finally:
        close = getattr(names, 'close', None)
        if callable(close):
            close()
    return tokens
