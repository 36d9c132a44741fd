"""Token stream storage mixed into documented entities.

Tokens are produced by an upstream lexer; this module only stores them and
turns them back into source text.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union


@dataclass(frozen=True)
class Token:
    """A single lexical token with its source position."""

    line_no: int
    char_no: int
    text: str


TokenInput = Union[Token, Iterable[Token]]


class TokenStreamMixin:
    """Collects tokens for the entity it is mixed into."""

    _token_stream: Optional[List[Token]] = None

    def collect_tokens(self) -> None:
        """Start (or restart) collecting tokens."""
        self._token_stream = []

    start_collecting_tokens = collect_tokens

    def add_token(self, token: Token) -> None:
        if self._token_stream is None:
            self.collect_tokens()
        self._token_stream.append(token)

    def add_tokens(self, *tokens: TokenInput) -> None:
        """Append tokens; list arguments are flattened one level."""
        for item in tokens:
            if isinstance(item, Token):
                self.add_token(item)
            else:
                for token in item:
                    self.add_token(token)

    def pop_token(self) -> Optional[Token]:
        """Remove and return the most recently added token."""
        if not self._token_stream:
            return None
        return self._token_stream.pop()

    @property
    def token_stream(self) -> Optional[List[Token]]:
        return self._token_stream

    def tokens_to_s(self) -> str:
        """Source text reassembled from the collected tokens."""
        if not self._token_stream:
            return ""
        return "".join(token.text for token in self._token_stream)
