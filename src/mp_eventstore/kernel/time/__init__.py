"""Kernel time – UTC helpers and sortable timestamp encoding."""
from mp_eventstore.kernel.time.timestamps import parse_sortable_string, to_sortable_string, utc_now

__all__ = ["parse_sortable_string", "to_sortable_string", "utc_now"]
