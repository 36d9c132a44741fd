"""Owning-namespace contract for documented methods."""

from dataclasses import dataclass, field
from typing import Protocol


class ContainerRef(Protocol):
    """Anything a method can belong to: a class or module page."""

    @property
    def full_name(self) -> str:
        ...

    @property
    def path(self) -> str:
        ...


def default_namespace_path(full_name: str) -> str:
    """``Foo::Bar`` -> ``Foo/Bar.html``."""
    return full_name.replace("::", "/") + ".html"


@dataclass(eq=False)
class Namespace:
    """Minimal class/module value usable as a method container.

    ``eq=False`` keeps instances hashable and weak-referenceable by identity.
    """

    full_name: str
    path: str = field(default="")

    def __post_init__(self) -> None:
        if not self.full_name or not self.full_name.strip():
            raise ValueError("Namespace full_name must be a non-empty string")
        if not self.path:
            self.path = default_namespace_path(self.full_name)

    def __repr__(self) -> str:
        return f"Namespace({self.full_name!r})"
