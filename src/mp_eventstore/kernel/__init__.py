"""Kernel – messages, serialization ports, errors and time helpers."""
