"""Type aliases for dynamic data structures throughout the application.

All types defined here should be JSON-serializable so they can flow into
logs and API responses unchanged.
"""

from typing import Any, TypeAlias

# Context dictionary for error details and debugging information
ErrorContext: TypeAlias = dict[str, Any]

# Column name -> value mapping written to the animal table
RecordValues: TypeAlias = dict[str, str | None]
