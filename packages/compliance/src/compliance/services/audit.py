# This project was developed with assistance from AI tools.
"""Audit event service.

Writes append-only activity entries for review decisions, resubmissions and
submissions. Each row stores the SHA-256 hash of its predecessor so tampering
shows up as a broken chain; a PostgreSQL advisory lock serializes writers so
two concurrent decisions cannot link to the same predecessor.
"""

import hashlib
import json
import logging

from db import AuditEvent
from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

AUDIT_LOCK_KEY = 910_001
GENESIS_HASH = "genesis"


def compute_event_hash(event_id: int, timestamp: str, event_data: dict | None) -> str:
    """SHA-256 over an event's id, timestamp and canonical JSON payload."""
    payload = f"{event_id}|{timestamp}|{json.dumps(event_data, sort_keys=True, default=str)}"
    return hashlib.sha256(payload.encode()).hexdigest()


async def write_audit_event(
    session: AsyncSession,
    *,
    event_type: str,
    user_id: str | None = None,
    submission_id: int | None = None,
    document_id: int | None = None,
    event_data: dict | None = None,
) -> AuditEvent:
    """Append one audit event linked to the current chain head.

    The row is flushed, not committed; it lands or rolls back together with
    the caller's transaction.
    """
    await session.execute(text(f"SELECT pg_advisory_xact_lock({AUDIT_LOCK_KEY})"))

    head_stmt = select(AuditEvent).order_by(AuditEvent.id.desc()).limit(1)
    head = (await session.execute(head_stmt)).scalar_one_or_none()
    prev_hash = (
        compute_event_hash(head.id, str(head.timestamp), head.event_data)
        if head is not None
        else GENESIS_HASH
    )

    event = AuditEvent(
        event_type=event_type,
        user_id=user_id,
        submission_id=submission_id,
        document_id=document_id,
        event_data=event_data,
        prev_hash=prev_hash,
    )
    session.add(event)
    await session.flush()
    return event


def find_chain_break(events: list) -> int | None:
    """Return the id of the first event whose prev_hash does not match, else None."""
    expected = GENESIS_HASH
    for event in events:
        if event.prev_hash != expected:
            return event.id
        expected = compute_event_hash(event.id, str(event.timestamp), event.event_data)
    return None


async def verify_audit_chain(session: AsyncSession) -> dict:
    """Walk all events in id order and report whether the chain is intact.

    Returns:
        {"status": "OK", "events_checked": N} or
        {"status": "TAMPERED", "first_break_id": id, "events_checked": N}.
    """
    result = await session.execute(select(AuditEvent).order_by(AuditEvent.id.asc()))
    events = list(result.scalars().all())

    break_id = find_chain_break(events)
    if break_id is None:
        return {"status": "OK", "events_checked": len(events)}

    checked = next(i for i, e in enumerate(events, start=1) if e.id == break_id)
    logger.warning("Audit chain broken at event %s", break_id)
    return {"status": "TAMPERED", "first_break_id": break_id, "events_checked": checked}
