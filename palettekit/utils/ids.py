"""
palettekit Request ID Utilities
Generate unique request IDs for tracing.
"""
import uuid
from datetime import datetime


def generate_request_id(prefix: str = "pal") -> str:
    """
    Generate a unique request ID for tracking.

    Args:
        prefix: Short tag naming the operation (``pal`` for palettes, ``clu`` for raw clustering)

    Returns:
        Request ID of the form ``<prefix>-<YYYYmmddHHMMSS>-<8 hex chars>``
    """
    timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
    return f"{prefix}-{timestamp}-{uuid.uuid4().hex[:8]}"


def extract_timestamp_from_request_id(request_id: str) -> str:
    """Return the timestamp part of a request ID, or an empty string if it is malformed."""
    parts = request_id.split("-")
    if len(parts) == 3 and len(parts[1]) == 14 and parts[1].isdigit():
        return parts[1]
    return ""
