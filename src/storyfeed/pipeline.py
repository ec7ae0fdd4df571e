"""Two-phase fetch: the index of identifiers, then each record in parallel.

Failure handling is asymmetric. A broken index fails the whole load, because
nothing after it can be trusted. A broken record only drops that record; the
load still succeeds with whatever decoded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from storyfeed.errors import TransportError
from storyfeed.result import Failure, Result, Success
from storyfeed.schema import decode_index, decode_json, record_decoder

if TYPE_CHECKING:
    from collections.abc import Sequence

    from storyfeed.config import Config
    from storyfeed.schema import Record
    from storyfeed.transport import Transport

logger = logging.getLogger(__name__)


def select_ids(ids: Sequence[int], limit: int) -> list[int]:
    """Return the first ``limit`` ids in index order."""
    return list(ids[:limit])


async def fetch_index(transport: Transport, config: Config) -> Result[list[int], str]:
    """Fetch and decode the identifier index.

    Returns ``Failure`` carrying the raw body on a non-200 status, the
    transport message when no response arrived, or the decoder message when
    the body is not a list of integers.
    """
    try:
        response = await transport.get(config.index_url)
    except TransportError as exc:
        logger.warning("Index request failed: %s", exc)
        return Failure(str(exc))

    if not response.ok:
        logger.warning("Index returned HTTP %s", response.status_code)
        return Failure(response.text)

    decoded = decode_json(response.text, decode_index)
    match decoded:
        case Success(value=ids):
            return Success(ids)
        case Failure(error=err):
            logger.warning("Index body did not decode: %s", err)
            return Failure(str(err))


async def fetch_record(
    transport: Transport, config: Config, item_id: int
) -> Record | None:
    """Fetch one record; any failure yields ``None`` instead of an error."""
    url = config.item_url(item_id)
    try:
        response = await transport.get(url)
    except TransportError as exc:
        logger.debug("Dropping record %d: %s", item_id, exc)
        return None

    if not response.ok:
        logger.debug("Dropping record %d: HTTP %s", item_id, response.status_code)
        return None

    decoded = decode_json(response.text, record_decoder(config.schema))
    if isinstance(decoded, Failure):
        logger.debug("Dropping record %d: %s", item_id, decoded.error)
        return None
    return decoded.value


async def load_records(transport: Transport, config: Config) -> Result[list[Record], str]:
    """Run the full pipeline and aggregate the records that decoded.

    Every selected record is fetched concurrently and all of them settle
    before aggregation. The result keeps index order, not completion order.
    """
    index = await fetch_index(transport, config)
    if isinstance(index, Failure):
        return index

    ids = select_ids(index.value, config.max_items)
    logger.debug("Fetching %d of %d records", len(ids), len(index.value))

    tasks = [asyncio.create_task(fetch_record(transport, config, i)) for i in ids]
    # Every task settles before aggregation; exceptions come back as values.
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    records: list[Record] = []
    for item_id, outcome in zip(ids, outcomes, strict=True):
        if isinstance(outcome, asyncio.CancelledError):
            raise outcome
        if isinstance(outcome, BaseException):
            logger.debug("Dropping record %d: %r", item_id, outcome)
            continue
        if outcome is not None:
            records.append(outcome)
    if len(records) < len(ids):
        logger.info("Dropped %d of %d records", len(ids) - len(records), len(ids))
    return Success(records)
