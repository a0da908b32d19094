"""Per-template expansion cache.

Expansion is combinatorial for templates with several free variables, so
its result is kept per template id. The card editor calls invalidate() after
a template's groups are edited or the template is deleted.
"""

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from analysis.logic.expander import expand_template
from analysis.logic.types import ConcreteCombination, HandTemplate

logger = structlog.get_logger()

type Expansion = tuple[ConcreteCombination, ...]


class ExpansionCache:
    """
    Thread-safe cache of template expansions keyed by template id.

    At most one expansion runs per template id at a time; concurrent callers
    for the same id wait and reuse the result. Entries are replaced, never
    mutated. invalidate() bumps the id's generation so that a computation
    already in flight when the template changed does not store its result.
    """

    def __init__(self, expand: Callable[[HandTemplate], Expansion] = expand_template) -> None:
        self._expand = expand
        self._entries: dict[int, Expansion] = {}
        self._generations: dict[int, int] = {}
        # per-id locks and generations exist only while some caller is computing or waiting on that id
        self._key_locks: dict[int, threading.Lock] = {}
        self._key_users: dict[int, int] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, template_id: object) -> bool:
        with self._lock:
            return template_id in self._entries

    @contextmanager
    def _key_lock(self, template_id: int) -> Iterator[None]:
        with self._lock:
            lock = self._key_locks.setdefault(template_id, threading.Lock())
            self._key_users[template_id] = self._key_users.get(template_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._lock:
                self._key_users[template_id] -= 1
                if not self._key_users[template_id]:
                    del self._key_users[template_id]
                    del self._key_locks[template_id]
                    self._generations.pop(template_id, None)

    def get_or_expand(self, template: HandTemplate) -> Expansion:
        """Return the cached expansion for a template, computing it on a miss."""
        with self._lock:
            cached = self._entries.get(template.id)
        if cached is not None:
            return cached

        with self._key_lock(template.id):
            with self._lock:
                cached = self._entries.get(template.id)
                generation = self._generations.setdefault(template.id, 0)
            if cached is not None:
                return cached

            logger.debug("expansion cache miss", template_id=template.id)
            expansion = self._expand(template)

            with self._lock:
                if self._generations.get(template.id, 0) == generation:
                    self._entries[template.id] = expansion
                else:
                    logger.debug("discarding stale expansion", template_id=template.id)
            return expansion

    def invalidate(self, template_id: int) -> None:
        """Drop a template's expansion after its groups change or it is deleted."""
        with self._lock:
            self._entries.pop(template_id, None)
            if template_id in self._generations:
                self._generations[template_id] += 1
        logger.debug("invalidated template expansion", template_id=template_id)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for template_id in self._generations:
                self._generations[template_id] += 1
