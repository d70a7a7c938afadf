"""MongoDB adapter — MongoEventStoreSettings."""

from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_eventstore.config.settings import Settings
from mp_eventstore.config.validation import InvalidSettingValueError


@dataclasses.dataclass
class MongoEventStoreSettings(Settings):
    """Where events and snapshots live, read from ``EVENTSTORE_*`` variables."""

    _prefix: ClassVar[str] = "EVENTSTORE"

    database_name: str = "eventstore"
    events_collection: str = "domainevents"
    snapshots_collection: str = "snapshotevents"
    skip_unknown_types: bool = False

    def _validate(self) -> None:
        for name in ("database_name", "events_collection", "snapshots_collection"):
            if not getattr(self, name).strip():
                raise InvalidSettingValueError(name, getattr(self, name), "must not be empty")
        if self.events_collection == self.snapshots_collection:
            raise InvalidSettingValueError(
                "snapshots_collection",
                self.snapshots_collection,
                "events and snapshots need separate collections",
            )


__all__ = ["MongoEventStoreSettings"]
