"""Serialization module: plain-dict codecs for stored models and snapshots."""

from load_engine.serialization.snapshot import (
    dump_repository,
    load_repository,
    projection_to_records,
)

__all__ = ["dump_repository", "load_repository", "projection_to_records"]
