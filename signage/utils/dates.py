"""
Date helpers.

Layout timestamps are written through textual SQL, so they are formatted here
instead of being left to a column type.
"""

from datetime import datetime, timezone

SYSTEM_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_system_date(value=None):
    """
    Format a datetime (default: now, UTC) for storage.

    Args:
        value: Optional datetime to format

    Returns:
        String in ``YYYY-MM-DD HH:MM:SS`` format
    """
    if value is None:
        value = datetime.now(timezone.utc)
    elif value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime(SYSTEM_DATE_FORMAT)
