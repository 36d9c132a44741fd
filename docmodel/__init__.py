"""
Documented method model.

Method records with their aliases, ordering, derived display names and
the fixed-order cache layout used by incremental documentation builds.
"""

from docmodel.alias import AliasRef, MethodAlias
from docmodel.comment import (
    CommentParser,
    PlainCommentParser,
    StructuredComment,
    get_default_comment_parser,
    set_default_comment_parser,
)
from docmodel.config import MARSHAL_VERSION, VISIBILITIES
from docmodel.container import ContainerRef, Namespace
from docmodel.errors import (
    MethodModelError,
    MissingContainerError,
    UnsupportedFormatError,
)
from docmodel.method_record import MethodRecord
from docmodel.session import BuildSession
from docmodel.token_stream import Token, TokenStreamMixin

__all__ = [
    # Entities
    "MethodRecord",
    "MethodAlias",
    "AliasRef",
    "Namespace",
    "ContainerRef",
    # Collaborators
    "CommentParser",
    "PlainCommentParser",
    "StructuredComment",
    "get_default_comment_parser",
    "set_default_comment_parser",
    "Token",
    "TokenStreamMixin",
    # Session
    "BuildSession",
    # Constants and errors
    "MARSHAL_VERSION",
    "VISIBILITIES",
    "MethodModelError",
    "MissingContainerError",
    "UnsupportedFormatError",
]
