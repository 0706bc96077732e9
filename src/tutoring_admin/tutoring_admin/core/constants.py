"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

ARCHIVE_CACHE_KEY = "deleted_groups_cache"

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"

CSV_ENCODING = "utf-8-sig"
