"""
Base Domain Classes

This module provides the foundational building blocks for Domain-Driven Design:
- Entity: Objects with identity assigned by the persistence collaborator
- ValueObject: Immutable objects compared by value
- Aggregate: Consistency boundaries that record domain events
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import List
from uuid import UUID, uuid4


@dataclass(kw_only=True)
class Entity(ABC):
    """
    Base class for all entities

    The id is assigned by the store on create and stays None
    for entities that have not been persisted yet.
    """
    id: int | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(kw_only=True)
class Aggregate(Entity):
    """
    Base class for aggregate roots

    Aggregates collect domain events; the unit of work publishes them
    after the surrounding transaction commits.
    """
    _events: List['DomainEvent'] = field(
        default_factory=list, repr=False, init=False, compare=False
    )

    def add_event(self, event: 'DomainEvent'):
        """Add a domain event to be published"""
        self._events.append(event)

    def clear_events(self):
        """Clear all collected events (called after publishing)"""
        self._events.clear()

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of collected events"""
        return self._events.copy()


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events are published on the message bus once the unit of work
    that produced them has committed.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)
    aggregate_id: int | None = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': self.aggregate_id,
        }
