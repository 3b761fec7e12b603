"""Utility helpers for canopy."""

from .uuid import generate_uuid_v7, extract_timestamp_from_uuid_v7

__all__ = [
    "generate_uuid_v7",
    "extract_timestamp_from_uuid_v7",
]
