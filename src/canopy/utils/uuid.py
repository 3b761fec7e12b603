"""UUIDv7 helpers.

Identifiers across canopy are time-ordered so that primary-key indexes on
blocks, links and role assignments stay append-friendly.
"""

import time
import uuid
from datetime import datetime, timezone
from typing import Optional


def generate_uuid_v7() -> uuid.UUID:
    """
    Generate a UUIDv7 with time-based ordering.

    Returns:
        UUID whose first 48 bits are the current Unix time in milliseconds
    """
    timestamp_ms = int(time.time() * 1000)
    timestamp_bytes = timestamp_ms.to_bytes(6, byteorder='big')

    # 80 random bits for the rest
    random_bytes = uuid.uuid4().bytes[6:]
    uuid_bytes = timestamp_bytes + random_bytes

    # Version 7 in the high nibble of byte 6
    uuid_bytes = uuid_bytes[:6] + bytes([(uuid_bytes[6] & 0x0f) | 0x70]) + uuid_bytes[7:]

    # RFC 4122 variant in the top bits of byte 8
    uuid_bytes = uuid_bytes[:8] + bytes([(uuid_bytes[8] & 0x3f) | 0x80]) + uuid_bytes[9:]

    return uuid.UUID(bytes=uuid_bytes)


def extract_timestamp_from_uuid_v7(value: uuid.UUID) -> Optional[datetime]:
    """
    Extract the embedded timestamp from a UUIDv7.

    Args:
        value: UUID to inspect

    Returns:
        Aware UTC datetime, or None if the UUID is not version 7
    """
    if value.version != 7:
        return None

    timestamp_ms = int.from_bytes(value.bytes[:6], byteorder='big')
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)
