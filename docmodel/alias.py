"""
Alias entities for documented methods.

``MethodAlias`` is the entity attached to a method's alias list, either at
extraction time or when a cached record is loaded. ``AliasRef`` is the
denormalized snapshot written into the cache; it is not a live link to the
aliasing method.
"""

import weakref
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from docmodel.comment import CommentInput
from docmodel.config import (
    HTML_NAME_RE,
    INSTANCE_SEPARATOR,
    SINGLETON_SEPARATOR,
    UNKNOWN_CONTAINER,
)
from docmodel.container import ContainerRef


class MethodAlias:
    """An alternate name for a documented method.

    Attributes:
        text: Source token stream of the alias statement, if any.
        old_name: Name being aliased. Loaded aliases carry the alias's
            full name here, since the cache stores only that.
        new_name: The alias name, or None when loaded from a snapshot.
        comment: Raw or structured comment attached to the alias.
        singleton: Whether the alias names a singleton method.
    """

    def __init__(
        self,
        text: Any,
        old_name: str,
        new_name: Optional[str],
        comment: CommentInput = None,
        singleton: bool = False,
    ):
        self.text = text
        self.old_name = old_name
        self.new_name = new_name
        self.comment = comment
        self.singleton = singleton
        self._container_ref: Optional[weakref.ref] = None

    @property
    def container(self) -> Optional[ContainerRef]:
        if self._container_ref is None:
            return None
        return self._container_ref()

    @container.setter
    def container(self, value: Optional[ContainerRef]) -> None:
        self._container_ref = weakref.ref(value) if value is not None else None

    @property
    def name(self) -> str:
        return self.new_name if self.new_name is not None else self.old_name

    @property
    def pretty_name(self) -> str:
        separator = SINGLETON_SEPARATOR if self.singleton else INSTANCE_SEPARATOR
        return f"{separator}{self.name}"

    @property
    def full_name(self) -> str:
        if self.new_name is None:
            return self.old_name
        container = self.container
        prefix = container.full_name if container is not None else UNKNOWN_CONTAINER
        return f"{prefix}{self.pretty_name}"

    @property
    def html_name(self) -> str:
        return HTML_NAME_RE.sub("-", self.name)

    def __repr__(self) -> str:
        return f"<MethodAlias {self.full_name} (alias for {self.old_name})>"


AliasFactory = Callable[[Any, str, Optional[str], CommentInput], MethodAlias]


@dataclass(frozen=True)
class AliasRef:
    """Cache snapshot of one alias: full name and parsed comment."""

    old_full_name: str
    new_name: Optional[str]
    comment: Any

    def to_marshal(self) -> List[Any]:
        return [self.old_full_name, self.comment]
