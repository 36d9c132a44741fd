"""Tests for the plain comment parser."""

import pytest

from docmodel.comment import (
    PlainCommentParser,
    StructuredComment,
    get_default_comment_parser,
    is_empty_comment,
    set_default_comment_parser,
)


def test_strips_hash_markers_and_splits_paragraphs() -> None:
    parsed = PlainCommentParser().parse("# First line\n# continues.\n#\n# Second.")
    assert parsed.paragraphs == ("First line continues.", "Second.")
    assert parsed.text == "First line continues.\n\nSecond."


def test_strips_c_style_markers() -> None:
    parsed = PlainCommentParser().parse("/**\n * Adds two numbers.\n */")
    assert parsed.paragraphs == ("Adds two numbers.",)


def test_none_gives_empty_comment() -> None:
    parsed = PlainCommentParser("markdown").parse(None)
    assert parsed.empty
    assert parsed.format == "markdown"


def test_structured_comment_passes_through() -> None:
    parser = PlainCommentParser()
    comment = StructuredComment(("Done.",))
    assert parser.parse(comment) is comment
    assert parser.parse_count == 0


def test_dict_round_trip() -> None:
    comment = StructuredComment(("One.", "Two."), format="markdown")
    assert StructuredComment.from_dict(comment.to_dict()) == comment


def test_from_dict_rejects_bad_payload() -> None:
    with pytest.raises(ValueError):
        StructuredComment.from_dict({"paragraphs": "oops"})


def test_is_empty_comment() -> None:
    assert is_empty_comment(None)
    assert is_empty_comment("  \n")
    assert is_empty_comment(StructuredComment())
    assert not is_empty_comment("# text")


def test_default_parser_can_be_replaced() -> None:
    custom = PlainCommentParser("markdown")
    set_default_comment_parser(custom)
    try:
        assert get_default_comment_parser() is custom
    finally:
        set_default_comment_parser(None)
    assert isinstance(get_default_comment_parser(), PlainCommentParser)
    assert get_default_comment_parser() is not custom
