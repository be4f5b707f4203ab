"""Identifier generation for tokens and object types.

Two strategies exist. Constant ids are derived from the names involved
(``nl:Person``, ``rt:KNOWS``, ``n:Person``, ``r:KNOWS``) and are stable
across runs. Random ids are time sorted ULIDs minted on every call, so
callers must memoize them per structural key with
:class:`CachingIdGenerator` to keep object types deduplicated.

None of the classes here are thread safe; build fresh instances for every
introspection call.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Tuple

from ulid import ULID

ENCLOSING_TICK_MARKS = re.compile(r"^`(.+)`$")

IdFactory = Callable[[], str]


def new_ulid() -> str:
    return str(ULID())


def parse_labels(value: str) -> List[str]:
    """Split a colon separated, optionally back-ticked list of names.

    Inside back-ticks a doubled back-tick stands for a single one.
    """
    names = []
    for part in value.split(':'):
        part = part.strip()
        if not part:
            continue
        match = ENCLOSING_TICK_MARKS.match(part)
        names.append(match.group(1).replace('``', '`') if match else part)
    return names


def split_strip_and_join(value: str, prefix: str) -> str:
    return f"{prefix}:" + ":".join(parse_labels(value))


def structural_key(labels: Iterable[str]) -> str:
    """Render a label set the way the node property table keys it: ``:`A`:`B```."""
    return ":" + ":".join("`" + label.replace('`', '``') + "`" for label in sorted(labels))


def label_key(value: str) -> Tuple[str, ...]:
    return tuple(sorted(parse_labels(value)))


def token_id_generator(prefix: str, use_constant_ids: bool, new_id: IdFactory) -> Callable[[str], str]:
    if use_constant_ids:
        return lambda name: f"{prefix}:{name}"
    return lambda name: new_id()


class NodeObjectIdGenerator:
    def __init__(self, use_constant_ids: bool, new_id: IdFactory):
        self.use_constant_ids = use_constant_ids
        self.new_id = new_id

    def __call__(self, node_type: str) -> str:
        if self.use_constant_ids:
            return split_strip_and_join(node_type, 'n')
        return self.new_id()


class RelationshipObjectIdGenerator:
    """Ids for relationship object types, keyed by type and target node object type.

    The first target seen for a relationship type gets the bare id, every
    further distinct target gets ``_1``, ``_2`` ... in order of appearance.
    """

    def __init__(self, use_constant_ids: bool, new_id: IdFactory):
        self.use_constant_ids = use_constant_ids
        self.new_id = new_id
        self._suffixes: Dict[str, Dict[str, int]] = {}

    def __call__(self, rel_type: str, target: str) -> str:
        if not self.use_constant_ids:
            return self.new_id()

        base = split_strip_and_join(rel_type, 'r')
        suffixes = self._suffixes.setdefault(base, {})
        if target not in suffixes:
            suffixes[target] = len(suffixes)
        suffix = suffixes[target]
        return base if suffix == 0 else f"{base}_{suffix}"


class CachingIdGenerator:
    """Remembers the id handed out for every cache key.

    ``key`` maps the call arguments to the cache key, by default the argument
    tuple itself.
    """

    def __init__(self, delegate: Callable[..., str], key: Optional[Callable[..., Hashable]] = None):
        self.delegate = delegate
        self.key = key
        self._cache: Dict[Any, str] = {}

    def __call__(self, *args: Any) -> str:
        cache_key = self.key(*args) if self.key else args
        if cache_key not in self._cache:
            self._cache[cache_key] = self.delegate(*args)
        return self._cache[cache_key]

    def __len__(self) -> int:
        return len(self._cache)


class IdGenerators:
    """The generators one introspection call works with."""

    def __init__(self, use_constant_ids: bool = True, new_id: Optional[IdFactory] = None):
        self.use_constant_ids = use_constant_ids
        self.new_id = new_id or new_ulid
        self.node_label = token_id_generator('nl', use_constant_ids, self.new_id)
        self.relationship_type = token_id_generator('rt', use_constant_ids, self.new_id)
        self.node_object = CachingIdGenerator(NodeObjectIdGenerator(use_constant_ids, self.new_id), key=label_key)
        self.relationship_object = CachingIdGenerator(RelationshipObjectIdGenerator(use_constant_ids, self.new_id))
