from __future__ import annotations

import logging
from collections.abc import Sequence

from ..db.store import LeadStore
from ..models.lead import NormalizedLead

"""Ingestion batcher: accepted leads -> one insert_batch call.

Whole batch or nothing. No chunking and no retry; the store's reason is passed
through unchanged in BatchInsertError.
"""

logger = logging.getLogger(__name__)


def submit_batch(store: LeadStore, leads: Sequence[NormalizedLead]) -> int:
    """Submit accepted leads; returns the number of rows submitted.

    An empty sequence issues no request and returns 0.

    Raises:
        BatchInsertError: the store rejected the batch; nothing was stored.
    """
    if not leads:
        return 0
    records = [lead.as_record() for lead in leads]
    logger.debug(f"submitting batch of {len(records)} leads")
    store.insert_batch(records)
    return len(records)
