from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import uuid4


@dataclass(frozen=True)
class DomainEvent:
    event_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)
    source: str = ""


@dataclass(frozen=True)
class SortAppliedEvent(DomainEvent):
    column_id: Optional[str] = None
    direction: str = ""
    mode: str = ""


@dataclass(frozen=True)
class PageLoadedEvent(DomainEvent):
    offset: int = 0
    requested: int = 0
    received: int = 0
    loaded_count: int = 0


@dataclass(frozen=True)
class StalePageDiscardedEvent(DomainEvent):
    generation: int = 0
    current_generation: int = 0
    received: int = 0
