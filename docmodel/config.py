"""
Constants for the documented-method model.

Defines the persisted record layout, visibility values and the patterns
used by the derived-name and signature formatting routines.
"""

import re
from typing import Literal, Set

# Current persisted record version; readers branch on it
MARSHAL_VERSION: int = 0

# Number of slots in a version-0 record (version tag included)
MARSHAL_RECORD_LENGTH: int = 9

# Full-name prefix used when a method has no container
UNKNOWN_CONTAINER: str = "(unknown)"

Visibility = Literal["public", "protected", "private"]

VISIBILITIES: Set[str] = {"public", "protected", "private"}

DEFAULT_VISIBILITY: Visibility = "public"

# Separators between a namespace and a method name
SINGLETON_SEPARATOR: str = "::"
INSTANCE_SEPARATOR: str = "#"

# First "<receiver>.<identifier>" on the first line of a call sequence
CALL_SEQ_NAME_RE = re.compile(r"^.*?\.(\w+)")

# Runs of characters that are not valid in an HTML anchor name
HTML_NAME_RE = re.compile(r"[^a-z]+")

# Trailing source comment on a parameter line
PARAM_COMMENT_RE = re.compile(r"\s*#.*")

# Explicit "&block" parameter, optionally preceded by a comma
BLOCK_ARG_RE = re.compile(r",?\s*&\w+")

MULTI_SPACE_RE = re.compile(r" {2,}")
