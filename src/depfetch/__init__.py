"""depfetch - dependency file retrieval stage of the update pipeline.

By default, depfetch's internal logging is disabled when used as a library.
Library users can enable logging by calling depfetch.enable_logging().
"""

from depfetch.common import disable_library_logging, enable_library_logging

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "enable_logging",
]
