"""Build session owning the method records of one documentation run."""

import logging
from typing import Any, Iterator, List, Optional

from core.fragment_sequence import DEFAULT_FRAGMENT_SEED, FragmentSequence
from docmodel.alias import AliasFactory, MethodAlias
from docmodel.comment import CommentParser, PlainCommentParser
from docmodel.container import ContainerRef
from docmodel.method_record import MethodRecord

logger = logging.getLogger(__name__)


class BuildSession:
    """Arena of records plus the sequence and parser they share.

    Records hold their container and alias target weakly; the session (or
    the caller) keeps the strong references for the length of the run.
    """

    def __init__(
        self,
        fragment_seed: str = DEFAULT_FRAGMENT_SEED,
        comment_parser: Optional[CommentParser] = None,
        alias_factory: AliasFactory = MethodAlias,
    ):
        self.sequence = FragmentSequence(fragment_seed)
        self.comment_parser = comment_parser or PlainCommentParser()
        self.alias_factory = alias_factory
        self._methods: List[MethodRecord] = []
        self._containers: List[ContainerRef] = []

    def new_method(
        self,
        text: Any,
        name: Optional[str],
        container: Optional[ContainerRef] = None,
    ) -> MethodRecord:
        """Create, attach and register a record."""
        record = MethodRecord(text, name, sequence=self.sequence)
        if container is not None:
            self.adopt_container(container)
            record.container = container
        self._methods.append(record)
        return record

    def adopt_container(self, container: ContainerRef) -> ContainerRef:
        """Keep ``container`` alive for as long as the session."""
        if not any(existing is container for existing in self._containers):
            self._containers.append(container)
        return container

    def load_method(self, payload: List[Any]) -> MethodRecord:
        """Import a cached record into the session with a fresh reference."""
        record = MethodRecord.from_marshal(
            payload,
            sequence=self.sequence,
            alias_factory=self.alias_factory,
        )
        self._methods.append(record)
        return record

    def export_method(self, record: MethodRecord) -> List[Any]:
        return record.marshal_dump(self.comment_parser)

    def reset(self) -> None:
        """Forget every record and reseed the fragment sequence."""
        logger.debug("Resetting build session (%d methods)", len(self._methods))
        self._methods.clear()
        self._containers.clear()
        self.sequence.reset()

    @property
    def methods(self) -> List[MethodRecord]:
        return list(self._methods)

    def sorted_methods(self) -> List[MethodRecord]:
        """Records in documentation order: singleton methods first, by name."""
        return sorted(self._methods)

    def __iter__(self) -> Iterator[MethodRecord]:
        return iter(self._methods)

    def __len__(self) -> int:
        return len(self._methods)
