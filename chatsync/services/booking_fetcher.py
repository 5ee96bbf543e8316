"""BookingRecordFetcher: page through the provider's records listing."""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from chatsync.clients.booking import BaseBookingClient, RawRecord, RecordFilter
from chatsync.core.exceptions import BookingProviderError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class BookingRecordFetcher:
    """Collects every record (soft-deleted included) matching a filter.

    Pages are requested from 1 while ``page * page_size < total_count`` and
    concatenated in upstream order. A failed page aborts the whole fetch:
    callers get an exception, never a partial list. Records come back
    unvalidated; see BookingRecord.model_validate.
    """

    def __init__(self, client: BaseBookingClient, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size

    async def fetch_all(self, record_filter: RecordFilter) -> List[RawRecord]:
        records: List[RawRecord] = []
        page = 1
        while True:
            page_filter = record_filter.model_copy(
                update={"page": page, "page_size": self._page_size, "include_deleted": True},
            )
            response = await self._client.fetch_records(page_filter)
            if not response.success:
                raise BookingProviderError(
                    f"Record listing failed on page {page}",
                    details={
                        "page": page,
                        "staff_id": record_filter.staff_id,
                        "client_id": record_filter.client_id,
                    },
                )
            records.extend(response.data or [])
            if page * self._page_size >= response.meta.total_count:
                break
            page += 1
        logger.debug(
            "Fetched %d records in %d page(s) (staff_id=%s client_id=%s)",
            len(records), page, record_filter.staff_id, record_filter.client_id,
        )
        return records

    async def fetch_staff_records(
        self,
        staff_id: int,
        *,
        start_date: Optional[date] = None,
        user_token: Optional[str] = None,
    ) -> List[RawRecord]:
        return await self.fetch_all(
            RecordFilter(staff_id=staff_id, start_date=start_date, user_token=user_token)
        )

    async def fetch_client_records(
        self,
        client_id: int,
        *,
        user_token: Optional[str] = None,
    ) -> List[RawRecord]:
        return await self.fetch_all(RecordFilter(client_id=client_id, user_token=user_token))
