"""
Documented method record.

A ``MethodRecord`` describes one documented callable: its name, signature
text, visibility, aliases and ordering. Records are created by the
extraction pass, enriched by later passes, and persisted into the method
cache as a fixed-order list (see ``marshal_dump``).
"""

import logging
import weakref
from typing import Any, List, Optional

from core.fragment_sequence import (
    FragmentSequence,
    get_default_sequence,
    reset_default_sequence,
)
from docmodel.alias import AliasFactory, AliasRef, MethodAlias
from docmodel.comment import (
    CommentInput,
    CommentParser,
    get_default_comment_parser,
    is_empty_comment,
)
from docmodel.config import (
    BLOCK_ARG_RE,
    CALL_SEQ_NAME_RE,
    DEFAULT_VISIBILITY,
    HTML_NAME_RE,
    INSTANCE_SEPARATOR,
    MARSHAL_RECORD_LENGTH,
    MARSHAL_VERSION,
    MULTI_SPACE_RE,
    PARAM_COMMENT_RE,
    SINGLETON_SEPARATOR,
    UNKNOWN_CONTAINER,
)
from docmodel.container import ContainerRef
from docmodel.errors import MissingContainerError, UnsupportedFormatError
from docmodel.token_stream import TokenStreamMixin

logger = logging.getLogger(__name__)


def _clean_signature_text(text: str) -> str:
    """Drop trailing ``#`` comments and fold the text onto one line."""
    text = PARAM_COMMENT_RE.sub("", text)
    text = text.replace("\n", " ")
    return MULTI_SPACE_RE.sub(" ", text)


def _check_marshal_payload(array: Any) -> None:
    """Reject payloads ``marshal_load`` cannot read.

    Raises:
        UnsupportedFormatError: On an unknown version tag.
        ValueError: If the payload does not have the expected shape.
    """
    if not isinstance(array, (list, tuple)):
        raise ValueError(
            f"Malformed method record: expected a list, got {type(array).__name__}"
        )
    version = array[0] if array else None
    if isinstance(version, bool) or version != MARSHAL_VERSION:
        raise UnsupportedFormatError(version)
    if len(array) != MARSHAL_RECORD_LENGTH:
        raise ValueError(
            f"Malformed method record: expected {MARSHAL_RECORD_LENGTH} "
            f"slots, got {len(array)}"
        )
    snapshots = array[8]
    if snapshots is None:
        return
    if not isinstance(snapshots, (list, tuple)):
        raise ValueError("Malformed method record: aliases must be a list")
    for snapshot in snapshots:
        if not isinstance(snapshot, (list, tuple)) or len(snapshot) not in (2, 3):
            raise ValueError(f"Malformed alias snapshot: {snapshot!r}")


class MethodRecord(TokenStreamMixin):
    """A documented method, possibly a singleton (class-level) method.

    Attributes:
        visibility: One of ``public``, ``protected``, ``private``.
        singleton: True for class-level methods, None when unknown.
        params: Raw parameter-list text as written in the source.
        block_params: Raw parameters yielded to the block, if any.
        call_seq: Newline-separated alternative call signatures.
        comment: Raw comment text or an already parsed comment.
        dont_rename_initialize: Suppresses displaying ``#initialize`` as
            ``::new``.
    """

    def __init__(
        self,
        text: Any,
        name: Optional[str],
        sequence: Optional[FragmentSequence] = None,
    ):
        self._text = text
        self._name = name
        self._token_stream = None
        self.visibility = DEFAULT_VISIBILITY
        self.dont_rename_initialize = False
        self.singleton: Optional[bool] = None
        self.params: Optional[str] = None
        self.block_params: Optional[str] = None
        self.call_seq: Optional[str] = None
        self.comment: CommentInput = None
        self._aliases: List[Any] = []
        self._is_alias_for_ref: Optional[weakref.ref] = None
        self._container_ref: Optional[weakref.ref] = None
        self._full_name: Optional[str] = None

        self._aref = (sequence or get_default_sequence()).next_id()

    @classmethod
    def reset(cls) -> None:
        """Reseed the process-wide fragment reference sequence."""
        reset_default_sequence()

    # -- plain accessors ---------------------------------------------------

    @property
    def text(self) -> Any:
        return self._text

    @property
    def aref(self) -> str:
        """Fragment reference anchoring this method on its page."""
        return self._aref

    fragment_id = aref

    @property
    def aliases(self) -> List[Any]:
        return self._aliases

    @property
    def param(self) -> Optional[str]:
        return self.params

    @param.setter
    def param(self, value: Optional[str]) -> None:
        self.params = value

    parameters = param
    parameter = param

    @property
    def is_alias_for(self) -> Optional["MethodRecord"]:
        """The method this one aliases (held weakly)."""
        if self._is_alias_for_ref is None:
            return None
        return self._is_alias_for_ref()

    @is_alias_for.setter
    def is_alias_for(self, value: Optional["MethodRecord"]) -> None:
        self._is_alias_for_ref = weakref.ref(value) if value is not None else None

    @property
    def container(self) -> Optional[ContainerRef]:
        """Owning class or module (held weakly)."""
        if self._container_ref is None:
            return None
        return self._container_ref()

    @container.setter
    def container(self, value: Optional[ContainerRef]) -> None:
        self._container_ref = weakref.ref(value) if value is not None else None

    # -- ordering ----------------------------------------------------------

    def sort_key(self) -> tuple:
        """Singleton methods first, then by name."""
        return (0 if self.singleton else 1, self.name)

    def compare(self, other: "MethodRecord") -> int:
        """Three-way comparison on ``sort_key``.

        Raises:
            TypeError: If names are unresolved and the singleton ranks tie.
        """
        mine, theirs = self.sort_key(), other.sort_key()
        if mine < theirs:
            return -1
        if mine > theirs:
            return 1
        return 0

    def __lt__(self, other: "MethodRecord") -> bool:
        return self.compare(other) < 0

    def __le__(self, other: "MethodRecord") -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: "MethodRecord") -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: "MethodRecord") -> bool:
        return self.compare(other) >= 0

    # -- aliases -----------------------------------------------------------

    def add_alias(self, method: Any) -> None:
        """Append ``method`` to the alias list. No dedup, no back-pointer."""
        self._aliases.append(method)

    # -- derived names -----------------------------------------------------

    @property
    def name(self) -> Optional[str]:
        """Method name, falling back to the first call sequence line.

        ``Foo.bar(x)`` resolves to ``bar``; a call sequence without a
        ``receiver.identifier`` form is used verbatim. The resolved value is
        kept as the stored name.
        """
        if self._name is not None:
            return self._name
        if self.call_seq is None:
            return None

        match = CALL_SEQ_NAME_RE.match(self.call_seq)
        self._name = match.group(1) if match else self.call_seq
        return self._name

    @name.setter
    def name(self, value: Optional[str]) -> None:
        self._name = value

    @property
    def pretty_name(self) -> str:
        separator = SINGLETON_SEPARATOR if self.singleton else INSTANCE_SEPARATOR
        return f"{separator}{self.name}"

    @property
    def full_name(self) -> str:
        """Container full name plus ``pretty_name``, computed once."""
        if self._full_name is None:
            container = self.container
            prefix = container.full_name if container is not None else UNKNOWN_CONTAINER
            self._full_name = f"{prefix}{self.pretty_name}"
        return self._full_name

    @full_name.setter
    def full_name(self, value: Optional[str]) -> None:
        self._full_name = value

    @property
    def html_name(self) -> str:
        # Only lowercase ASCII letters survive.
        return HTML_NAME_RE.sub("-", self.name)

    @property
    def type(self) -> str:
        return "class" if self.singleton else "instance"

    @property
    def path(self) -> str:
        container = self.container
        if container is None:
            raise MissingContainerError(f"Method {self.full_name} has no container")
        return f"{container.path}#{self._aref}"

    @property
    def param_seq(self) -> str:
        """Pretty parameter list, with the block signature appended.

        ``params="(a, &blk)"`` and ``block_params="(x)"`` give
        ``"(a) { |x| ... }"``. Missing ``params`` format as ``()``.
        """
        params = _clean_signature_text(self.params or "")
        if not params.startswith("("):
            params = f"({params})"

        block = self.block_params
        if block is not None:
            params = BLOCK_ARG_RE.sub("", params, count=1)
            block = _clean_signature_text(block)
            if block.startswith("("):
                block = block[1:].replace(")", "", 1)
            params = f"{params} {{ |{block}| ... }}"

        return params

    # -- documentation -----------------------------------------------------

    @property
    def documented(self) -> bool:
        return not is_empty_comment(self.comment)

    def markup_code(self) -> str:
        """Source text of the method from its token stream."""
        return self.tokens_to_s()

    # -- persistence -------------------------------------------------------

    def marshal_dump(self, parser: Optional[CommentParser] = None) -> List[Any]:
        """Export as ``[version, name, full_name, singleton, visibility,
        comment, call_seq, block_params, aliases]``.

        Comments of the record and of every alias are run through
        ``parser`` (the process default when omitted).
        """
        parser = parser or get_default_comment_parser()
        aliases = [
            AliasRef(
                old_full_name=alias.full_name,
                new_name=getattr(alias, "new_name", None),
                comment=parser.parse(alias.comment),
            ).to_marshal()
            for alias in self._aliases
        ]
        return [
            MARSHAL_VERSION,
            self.name,
            self.full_name,
            self.singleton,
            self.visibility,
            parser.parse(self.comment),
            self.call_seq,
            self.block_params,
            aliases,
        ]

    def marshal_load(
        self,
        array: List[Any],
        alias_factory: AliasFactory = MethodAlias,
    ) -> None:
        """Populate this record from a ``marshal_dump`` payload.

        Token text, alias target, ``dont_rename_initialize`` and the fragment
        reference are not part of the payload and stay as they are.

        Raises:
            UnsupportedFormatError: On an unknown version tag.
            ValueError: If the payload does not have the expected shape.
        """
        _check_marshal_payload(array)

        self._name = array[1]
        self._full_name = array[2]
        self.singleton = array[3]
        self.visibility = array[4]
        self.comment = array[5]
        self.call_seq = array[6]
        self.block_params = array[7]

        for snapshot in array[8] or []:
            if len(snapshot) == 2:
                old_name, comment = snapshot
                new_name = None
            else:
                old_name, new_name, comment = snapshot
            self.add_alias(alias_factory(None, old_name, new_name, comment))

        logger.debug("Loaded method %s with %d alias(es)", self._full_name, len(self._aliases))

    @classmethod
    def from_marshal(
        cls,
        array: List[Any],
        sequence: Optional[FragmentSequence] = None,
        alias_factory: AliasFactory = MethodAlias,
    ) -> "MethodRecord":
        """Build a fresh record from a ``marshal_dump`` payload.

        The payload is checked before the record takes a fragment reference,
        so rejected payloads leave ``sequence`` untouched.
        """
        _check_marshal_payload(array)
        record = cls(None, None, sequence=sequence)
        record.marshal_load(array, alias_factory=alias_factory)
        return record

    # -- display -----------------------------------------------------------

    def __repr__(self) -> str:
        target = self.is_alias_for
        alias_for = f" (alias for {target.name})" if target is not None else ""
        return "<%s:0x%x %s (%s)%s>" % (
            type(self).__name__,
            id(self),
            self.full_name,
            self.visibility,
            alias_for,
        )

    def __str__(self) -> str:
        comment = "" if self.comment is None else str(self.comment)
        return f"{type(self).__name__}: {self.full_name} ({self._text})\n{comment}"

    def pretty_print(self) -> str:
        """Multi-line debugging dump of the record."""
        lines = [f"[{type(self).__name__} {self.full_name}"]
        target = self.is_alias_for
        if target is not None:
            lines.append(f"  alias for {target.name}")
        source = self.markup_code()
        if source:
            lines.append("  source:")
            lines.extend(f"    {line}" for line in source.splitlines())
        elif self._text:
            lines.append("  text:")
            lines.append(f"    {self._text!r}")
        if not is_empty_comment(self.comment):
            lines.append("  comment:")
            lines.extend(f"    {line}" for line in str(self.comment).splitlines())
        lines[-1] += "]"
        return "\n".join(lines)
