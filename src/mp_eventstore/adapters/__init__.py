"""Adapters – infrastructure bindings for the event store ports."""
