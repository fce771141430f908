"""Identifier allocation for products created locally."""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

from starlette.concurrency import run_in_threadpool

from fakeshop.core.errors import UpstreamUnavailableError
from fakeshop.db.models.product import ProductRow
from fakeshop.db.product_store import LocalProductStore
from fakeshop.external.fakestore import FakestoreClient
from fakeshop.utils.concurrency import gather_settled

logger = logging.getLogger(__name__)

BASE_ID = 1_000_000
EXTERNAL_MARGIN = 100_000
LOCAL_SAMPLE_SIZE = 10
FALLBACK_BASE_ID = 2_000_000
FALLBACK_WINDOW = 1_000_000
FALLBACK_JITTER = 9_999


def unix_millis() -> int:
    return int(time.time() * 1000)


class IdAllocator:
    """Pick an id above both the local and the external id spaces.

    Bounds are recomputed on every call; there is no counter and no reserved
    range, so two concurrent creates may compute the same candidate. The
    loser's insert fails on the primary key and takes the fallback path.
    """

    def __init__(
        self,
        store: LocalProductStore,
        catalog: FakestoreClient,
        rng: random.Random | None = None,
        clock: Callable[[], int] = unix_millis,
        strict: bool = False,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.rng = rng or random.Random()
        self.clock = clock
        self.strict = strict

    def _highest_local_id(self) -> int:
        ids = self.store.top_ids_descending(LOCAL_SAMPLE_SIZE)
        return max(ids, default=0)

    async def _highest_external_id(self) -> int:
        """Max positive integer id in the external catalog, 0 when unknown."""
        try:
            items = await self.catalog.fetch_all()
        except UpstreamUnavailableError as e:
            if self.strict:
                raise
            logger.warning(f"Could not fetch external products: {e}")
            return 0

        external_ids = [i for i in (item.numeric_id for item in items) if i is not None]
        highest = max(external_ids, default=0)
        if highest:
            logger.info(f"Highest external product ID: {highest}")
        return highest

    async def next_id(self) -> int:
        highest_local, highest_external = await gather_settled(
            run_in_threadpool(self._highest_local_id),
            self._highest_external_id(),
        )
        candidate = max(
            BASE_ID, highest_local + 1, highest_external + EXTERNAL_MARGIN
        )
        logger.info(
            f"Allocated product ID {candidate} (highest local: {highest_local}, "
            f"highest external: {highest_external})"
        )
        return candidate

    def fallback_id(self) -> int:
        """Time-derived id; collision resistant, not collision proof."""
        return (
            FALLBACK_BASE_ID
            + self.clock() % FALLBACK_WINDOW
            + self.rng.randint(0, FALLBACK_JITTER)
        )

    async def persist_new(self, build_row: Callable[[int], ProductRow]) -> ProductRow:
        """Allocate an id, persist ``build_row(id)`` and return the saved row.

        Any unexpected failure while computing the id or writing the row
        switches to the fallback id for a second and final write.
        """
        try:
            product_id = await self.next_id()
            return await run_in_threadpool(self.store.upsert, build_row(product_id))
        except UpstreamUnavailableError:
            # Only reachable in strict mode.
            raise
        except Exception as e:
            logger.error(f"Failed to create product: {e}", exc_info=True)

        fallback_id = self.fallback_id()
        logger.info(f"Using emergency fallback ID {fallback_id}")
        return await run_in_threadpool(self.store.upsert, build_row(fallback_id))
