"""Versioned, reference-counted pointer to the live vector collection.

Readers pin the current handle for the duration of a query. Writers swap in
a freshly built collection and then wait for readers of every older version
to finish before the old collection may be deleted.

Queries address the index through its alias, so a rebuild done by another
process (the management CLI, a second worker) is picked up without a
restart. The handle carries what the alias alone cannot: the distance
metric of the live collection and the version readers are pinned to.
``reload`` re-reads the alias to adopt collections built elsewhere.
"""

import asyncio
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from uuid import uuid4

from restaurant_search.config import DistanceMetric
from restaurant_search.logging_config import get_logger
from restaurant_search.vectorstore.service import VectorIndex

logger = get_logger(__name__)


@dataclass(frozen=True)
class IndexHandle:
    """Immutable description of the collection queries should use.

    Attributes:
        collection: Physical collection name, or None before the first build.
        metric: Distance metric the collection was created with.
        version: Increases by one on every swap.
    """

    collection: str | None
    metric: DistanceMetric
    version: int = 0


class IndexHandleProvider:
    """Hands out the current IndexHandle and performs atomic swaps."""

    def __init__(
        self,
        alias: str,
        handle: IndexHandle,
        build_metric: DistanceMetric | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            alias: Stable alias name; physical collections are derived from it.
            handle: Initial handle (possibly with no collection yet).
            build_metric: Metric for collections built from now on. Defaults
                to the initial handle's metric.
        """
        self.alias = alias
        self.build_metric = build_metric or handle.metric
        self._handle = handle
        self._readers: Counter[int] = Counter()
        self._drained = asyncio.Condition()
        self.write_lock = asyncio.Lock()

    def current(self) -> IndexHandle:
        """The handle new readers would receive."""
        return self._handle

    def active_readers(self, version: int) -> int:
        """Number of in-flight readers pinned to ``version``."""
        return self._readers[version]

    def new_collection_name(self) -> str:
        """A fresh physical collection name under this alias."""
        return f"{self.alias}-{uuid4().hex[:12]}"

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[IndexHandle]:
        """Pin the current handle until the block exits."""
        handle = self._handle
        self._readers[handle.version] += 1
        try:
            yield handle
        finally:
            self._readers[handle.version] -= 1
            if self._readers[handle.version] <= 0:
                del self._readers[handle.version]
                async with self._drained:
                    self._drained.notify_all()

    async def swap(self, collection: str, metric: DistanceMetric | None = None) -> IndexHandle:
        """Make ``collection`` current and wait for older versions to drain.

        Must be called while holding ``write_lock``.

        Args:
            collection: Newly built collection.
            metric: Metric it was built with (defaults to ``build_metric``).

        Returns:
            The previous handle.
        """
        old = self._handle
        new = IndexHandle(
            collection=collection,
            metric=metric or self.build_metric,
            version=old.version + 1,
        )
        self._handle = new
        logger.info(
            "Swapped live collection",
            extra={"old": old.collection, "new": collection, "version": new.version},
        )

        async with self._drained:
            await self._drained.wait_for(
                lambda: not any(version < new.version for version in self._readers)
            )
        return old

    async def reload(self, vector_index: VectorIndex) -> IndexHandle:
        """Re-read the alias and adopt whatever collection it points at now.

        Does not take ``write_lock``; if a local swap lands while the alias
        is being read, the swapped handle wins.

        Args:
            vector_index: Index used to resolve the alias.

        Returns:
            The current handle after the reload.

        Raises:
            VectorStoreError: If Qdrant cannot be reached.
        """
        seen = self._handle
        collection = await vector_index.resolve_alias(self.alias)
        if collection == seen.collection:
            return seen

        metric = seen.metric
        if collection is not None:
            live_metric = await vector_index.collection_metric(collection)
            if live_metric is None:
                logger.warning(
                    "Live collection uses an unsupported distance, assuming build metric",
                    extra={"collection": collection, "metric": self.build_metric.value},
                )
            metric = live_metric or self.build_metric

        if self._handle is seen:
            self._handle = IndexHandle(
                collection=collection,
                metric=metric,
                version=seen.version + 1,
            )
            logger.info(
                "Adopted collection behind alias",
                extra={
                    "alias": self.alias,
                    "old": seen.collection,
                    "new": collection,
                    "metric": metric.value,
                },
            )
        return self._handle
