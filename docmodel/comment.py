"""
Comment parsing collaborator.

Method records keep their comment either as raw source text or as an
already-parsed ``StructuredComment``. Parsing happens only when a record is
exported to the cache, through any object implementing ``CommentParser``.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"^\s*(?:#+|//+|/\*+|\*+/?|=begin|=end)\s?")
_TRAILING_CLOSE_RE = re.compile(r"\s*\*+/\s*$")


@dataclass(frozen=True)
class StructuredComment:
    """Parsed comment: an ordered list of plain-text paragraphs.

    Attributes:
        paragraphs: Paragraph texts with comment markers removed.
        format: Markup format the raw text was written in.
    """

    paragraphs: Tuple[str, ...] = field(default_factory=tuple)
    format: str = "rdoc"

    @property
    def empty(self) -> bool:
        return not any(p.strip() for p in self.paragraphs)

    @property
    def text(self) -> str:
        return "\n\n".join(self.paragraphs)

    def to_dict(self) -> Dict[str, Any]:
        return {"format": self.format, "paragraphs": list(self.paragraphs)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "StructuredComment":
        if not isinstance(payload, dict):
            raise ValueError("comment payload must be an object")
        paragraphs = payload.get("paragraphs", [])
        if not isinstance(paragraphs, list):
            raise ValueError("comment.paragraphs must be a list")
        return cls(
            paragraphs=tuple(str(p) for p in paragraphs),
            format=str(payload.get("format", "rdoc")),
        )

    def __str__(self) -> str:
        return self.text


CommentInput = Union[str, StructuredComment, None]


class CommentParser(Protocol):
    """Turns a raw comment into a ``StructuredComment``."""

    def parse(self, raw: CommentInput) -> StructuredComment:
        ...


class PlainCommentParser:
    """Marker-stripping comment parser.

    Removes ``#``, ``//``, ``/* */`` and ``=begin``/``=end`` markers from
    each line and groups the remaining lines into blank-line separated
    paragraphs. Lines inside a paragraph are joined with a single space.
    """

    def __init__(self, comment_format: str = "rdoc"):
        self.comment_format = comment_format
        self.parse_count = 0

    def parse(self, raw: CommentInput) -> StructuredComment:
        if isinstance(raw, StructuredComment):
            return raw
        self.parse_count += 1
        if raw is None:
            return StructuredComment(format=self.comment_format)

        paragraphs: List[str] = []
        current: List[str] = []
        for line in str(raw).splitlines():
            stripped = _TRAILING_CLOSE_RE.sub("", _MARKER_RE.sub("", line)).strip()
            if stripped:
                current.append(stripped)
            elif current:
                paragraphs.append(" ".join(current))
                current = []
        if current:
            paragraphs.append(" ".join(current))

        logger.debug("Parsed comment into %d paragraph(s)", len(paragraphs))
        return StructuredComment(paragraphs=tuple(paragraphs), format=self.comment_format)


def is_empty_comment(comment: Optional[CommentInput]) -> bool:
    """True for ``None``, blank strings and empty structured comments."""
    if comment is None:
        return True
    if isinstance(comment, StructuredComment):
        return comment.empty
    return not str(comment).strip()


_DEFAULT_PARSER: Optional[CommentParser] = None


def get_default_comment_parser() -> CommentParser:
    """Process-wide parser used when a caller does not supply one."""
    global _DEFAULT_PARSER
    if _DEFAULT_PARSER is None:
        _DEFAULT_PARSER = PlainCommentParser()
    return _DEFAULT_PARSER


def set_default_comment_parser(parser: Optional[CommentParser]) -> None:
    """Install ``parser`` as the process-wide default (``None`` restores it)."""
    global _DEFAULT_PARSER
    _DEFAULT_PARSER = parser
