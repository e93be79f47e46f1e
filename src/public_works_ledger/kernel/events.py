"""
Ledger events

An event records one accepted fact: a fiscal period opened, a project was
created, a budget was allocated, a payment was approved. The ordered event
log is the ledger's audit trail; every projection can be rebuilt from it.

Streams group the events of one aggregate (a project, a payment request,
the national totals); versions count within a stream, starting at 1.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Event(BaseModel):
    """Immutable envelope around a domain payload"""

    model_config = ConfigDict(frozen=True)

    event_id: str
    stream_id: str
    stream_type: str = Field(..., description="'project', 'allocation', 'national', ...")
    event_type: str = Field(..., description="'ProjectCreated', 'PaymentApproved', ...")
    occurred_at: datetime
    actor_id: str | None = None
    # Every event of one command shares its command_id (idempotency key)
    command_id: str
    payload: dict[str, Any] = Field(default_factory=dict)
    version: int = Field(..., ge=1)

    @property
    def entity_id(self) -> str:
        """Id of the aggregate this event belongs to (stream id without its type prefix)"""
        prefix = f"{self.stream_type}-"
        return self.stream_id.removeprefix(prefix)

    @property
    def amount(self) -> int:
        """Rupee amount carried by the payload, 0 when the event moves no money"""
        return int(self.payload.get("amount", 0))


def stream_id_for(stream_type: str, entity_id: str) -> str:
    """
    Stream id of one aggregate

    Prefixed by type, so a project, a policy and a payment request may share
    an entity id without sharing a stream.
    """
    return f"{stream_type}-{entity_id}"


def create_event(
    *,
    event_id: str,
    stream_id: str,
    stream_type: str,
    event_type: str,
    occurred_at: datetime,
    command_id: str,
    version: int,
    actor_id: str | None = None,
    payload: dict[str, Any] | None = None,
) -> Event:
    return Event(
        event_id=event_id,
        stream_id=stream_id,
        stream_type=stream_type,
        event_type=event_type,
        occurred_at=occurred_at,
        actor_id=actor_id,
        command_id=command_id,
        payload=payload or {},
        version=version,
    )
