"""In-memory indexer: summarizes dependency sources on demand and caches the result."""

from __future__ import annotations

import logging

from .assist import ContentAssistProvider
from .frontend.parse import ParseError
from .model import Summary

logger = logging.getLogger(__name__)


class MemoryIndexer:
    """Indexer over sources held in memory.

    global_sources are files whose globals are visible everywhere;
    module_sources are files addressable by module name via require/define.
    Callers always receive copies, so analysis never mutates the cache.
    """

    def __init__(
        self,
        global_sources: dict[str, str] | None = None,
        module_sources: dict[str, str] | None = None,
    ) -> None:
        self.global_sources: dict[str, str] = dict(global_sources or {})
        self.module_sources: dict[str, str] = dict(module_sources or {})
        self._cache: dict[tuple[str, str], Summary] = {}

    def _summarize(self, scope: str, name: str, source: str) -> Summary | None:
        key = (scope, name)
        summary = self._cache.get(key)
        if summary is None:
            try:
                summary = ContentAssistProvider().compute_summary(source, name)
            except ParseError as e:
                logger.warning("cannot summarize %s: %d:%d: %s", name, e.lineno, e.col, e.msg)
                return None
            self._cache[key] = summary
            logger.debug("summarized %s as %s", name, summary.kind)
        return summary.copy()

    def retrieve_global_summaries(self) -> list[Summary]:
        result: list[Summary] = []
        for name, source in self.global_sources.items():
            summary = self._summarize("global", name, source)
            if summary is not None:
                result.append(summary)
        return result

    def retrieve_summary(self, name: str) -> Summary | None:
        cached = self._cache.get(("module", name))
        if cached is not None:
            return cached.copy()
        source = self.module_sources.get(name)
        if source is None:
            return None
        return self._summarize("module", name, source)

    def has_dependency(self, name: str) -> bool:
        return name in self.module_sources or ("module", name) in self._cache

    def add_summary(self, name: str, summary: Summary) -> None:
        """Register a precomputed summary, e.g. one loaded from JSON."""
        self._cache[("module", name)] = summary

    def add_module(self, name: str, source: str) -> None:
        self.module_sources[name] = source
        self.invalidate(name)

    def invalidate(self, name: str) -> None:
        """Drop cached summaries for name so the next request re-summarizes it."""
        self._cache.pop(("global", name), None)
        self._cache.pop(("module", name), None)

