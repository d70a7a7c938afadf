"""Config settings – Settings base class for the event store."""
from __future__ import annotations

import dataclasses


@dataclasses.dataclass
class Settings:
    """Dataclass read field by field from ``<PREFIX>_<FIELD>`` variables.

    :class:`~mp_eventstore.adapters.mongodb.MongoEventStoreSettings` uses the
    ``EVENTSTORE`` prefix, so ``events_collection`` comes from
    ``EVENTSTORE_EVENTS_COLLECTION`` and ``skip_unknown_types`` from
    ``EVENTSTORE_SKIP_UNKNOWN_TYPES``.  Fields without a default must be
    present in the environment.

    :meth:`_validate` runs after construction, whether the instance was
    built by :class:`EnvSettingsLoader` or directly in code, and raises
    :class:`~mp_eventstore.config.validation.InvalidSettingValueError`.
    """

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Check field combinations; the base class accepts everything."""


__all__ = ["Settings"]
