"""Tests for method record naming, ordering and signature formatting."""

import gc
import itertools

import pytest

from core.fragment_sequence import FragmentSequence, get_default_sequence
from docmodel.container import Namespace
from docmodel.errors import MissingContainerError
from docmodel.method_record import MethodRecord
from docmodel.token_stream import Token


def _method(name, singleton=False, sequence=None, **attrs):
    record = MethodRecord(None, name, sequence=sequence or FragmentSequence())
    record.singleton = singleton
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


def test_defaults() -> None:
    record = MethodRecord("def foo; end", "foo", sequence=FragmentSequence())
    assert record.text == "def foo; end"
    assert record.visibility == "public"
    assert record.singleton is None
    assert record.call_seq is None
    assert record.is_alias_for is None
    assert record.aliases == []
    assert record.dont_rename_initialize is False
    assert record.aref == "M000000"
    assert record.fragment_id == "M000000"


def test_pretty_name_and_type() -> None:
    each = _method("each")
    new = _method("new", singleton=True)
    assert each.pretty_name == "#each"
    assert each.type == "instance"
    assert new.pretty_name == "::new"
    assert new.type == "class"


@pytest.mark.parametrize(
    "name,expected",
    [
        ("each_pair!", "each-pair-"),
        ("<=>", "-"),
        ("to_s", "to-s"),
        ("Array", "-rray"),
        ("empty?", "empty-"),
    ],
)
def test_html_name(name: str, expected: str) -> None:
    assert _method(name).html_name == expected


def test_name_from_call_seq_uses_first_line() -> None:
    record = _method(None, call_seq="Foo.bar(x)\nFoo.bar(x,y)")
    assert record.name == "bar"
    assert record.call_seq == "Foo.bar(x)\nFoo.bar(x,y)"


def test_name_from_call_seq_without_receiver_falls_back_to_text() -> None:
    record = _method(None, call_seq="bar(x) -> y")
    assert record.name == "bar(x) -> y"


def test_name_from_call_seq_ignores_later_lines() -> None:
    record = _method(None, call_seq="bar(x)\nFoo.baz(y)")
    assert record.name == "bar(x)\nFoo.baz(y)"


def test_resolved_name_is_cached() -> None:
    record = _method(None, call_seq="str.upcase")
    assert record.name == "upcase"
    record.call_seq = "str.downcase"
    assert record.name == "upcase"


def test_name_without_name_or_call_seq_is_none() -> None:
    assert _method(None).name is None


def test_explicit_name_wins_over_call_seq() -> None:
    record = _method("each", call_seq="obj.other")
    assert record.name == "each"


def test_full_name_without_container() -> None:
    assert _method("each").full_name == "(unknown)#each"


def test_full_name_with_container_is_memoized() -> None:
    foo = Namespace("Foo::Bar")
    other = Namespace("Other")
    record = _method("create", singleton=True)
    record.container = foo
    assert record.full_name == "Foo::Bar::create"
    record.container = other
    assert record.full_name == "Foo::Bar::create"


def test_path_uses_container_path_and_aref() -> None:
    seq = FragmentSequence()
    seq.next_id()
    foo = Namespace("Foo::Bar")
    record = _method("each", sequence=seq)
    record.container = foo
    assert record.path == "Foo/Bar.html#M000001"


def test_path_without_container_raises() -> None:
    with pytest.raises(MissingContainerError):
        _ = _method("each").path


def test_container_is_held_weakly() -> None:
    record = _method("each")
    ns = Namespace("Temp")
    record.container = ns
    assert record.container is ns
    del ns
    gc.collect()
    assert record.container is None


def test_is_alias_for_is_held_weakly() -> None:
    original = _method("each")
    alias = _method("each_pair")
    alias.is_alias_for = original
    assert alias.is_alias_for is original
    del original
    gc.collect()
    assert alias.is_alias_for is None


def test_add_alias_keeps_duplicates_in_order() -> None:
    record = _method("each")
    first, second = _method("a"), _method("b")
    record.add_alias(first)
    record.add_alias(second)
    record.add_alias(first)
    assert record.aliases == [first, second, first]
    assert first.is_alias_for is None


def test_param_accessor_aliases() -> None:
    record = _method("each")
    record.parameters = "(a)"
    assert record.params == "(a)"
    assert record.param == "(a)"
    assert record.parameter == "(a)"


def test_fragment_ids_increase_and_reset() -> None:
    seq = FragmentSequence()
    refs = [MethodRecord(None, f"m{i}", sequence=seq).aref for i in range(11)]
    assert refs[:3] == ["M000000", "M000001", "M000002"]
    assert refs[10] == "M000010"
    assert all(a < b for a, b in zip(refs, refs[1:]))
    seq.reset()
    assert MethodRecord(None, "again", sequence=seq).aref == "M000000"


def test_class_reset_reseeds_default_sequence() -> None:
    MethodRecord(None, "x")
    MethodRecord.reset()
    assert get_default_sequence().peek() == "M000000"
    assert MethodRecord(None, "y").aref == "M000000"


# -- ordering ---------------------------------------------------------------


def test_singleton_methods_sort_first() -> None:
    records = [
        _method("alpha"),
        _method("zeta", singleton=True),
        _method("beta"),
        _method("new", singleton=True),
    ]
    ordered = [r.pretty_name for r in sorted(records)]
    assert ordered == ["::new", "::zeta", "#alpha", "#beta"]


def test_compare_is_antisymmetric_and_transitive() -> None:
    records = [
        _method("a"),
        _method("b"),
        _method("a", singleton=True),
        _method("z", singleton=True),
        _method("b"),
    ]
    for a, b in itertools.product(records, repeat=2):
        assert a.compare(b) == -b.compare(a)
    for a, b, c in itertools.product(records, repeat=3):
        if a.compare(b) <= 0 and b.compare(c) <= 0:
            assert a.compare(c) <= 0


def test_compare_equal_pair_is_zero() -> None:
    assert _method("each").compare(_method("each")) == 0
    assert _method("each") <= _method("each")


def test_compare_with_unresolved_name_raises() -> None:
    with pytest.raises(TypeError):
        _method(None).compare(_method("each"))


# -- param_seq --------------------------------------------------------------


def test_param_seq_with_block_params() -> None:
    record = _method("each", params="(a, b)", block_params="(x)")
    assert record.param_seq == "(a, b) { |x| ... }"


def test_param_seq_wraps_in_parentheses() -> None:
    assert _method("each", params="a, b").param_seq == "(a, b)"


def test_param_seq_strips_comments_and_newlines() -> None:
    record = _method("each", params="(a, # first\n  b)")
    assert record.param_seq == "(a, b)"


def test_param_seq_drops_explicit_block_argument() -> None:
    record = _method("each", params="(a, &blk)", block_params="x, y")
    assert record.param_seq == "(a) { |x, y| ... }"


def test_param_seq_without_params_is_empty_list() -> None:
    assert _method("each").param_seq == "()"


def test_param_seq_does_not_mutate_fields() -> None:
    record = _method("each", params="a,\n  b # c", block_params="(x)")
    first = record.param_seq
    assert record.params == "a,\n  b # c"
    assert record.block_params == "(x)"
    assert record.param_seq == first


# -- display ----------------------------------------------------------------


def test_repr_mentions_alias_target() -> None:
    original = _method("each")
    alias = _method("each_pair")
    alias.is_alias_for = original
    text = repr(alias)
    assert text.startswith("<MethodRecord:0x")
    assert "(unknown)#each_pair (public) (alias for each)>" in text


def test_pretty_print_includes_comment() -> None:
    record = _method("each", comment="Iterates.")
    dump = record.pretty_print()
    assert dump.startswith("[MethodRecord (unknown)#each")
    assert "comment:" in dump
    assert dump.endswith("Iterates.]")


def test_pretty_print_shows_token_source() -> None:
    record = MethodRecord("def each; end", "each", sequence=FragmentSequence())
    record.add_tokens(Token(1, 0, "def each\n"), Token(2, 0, "end\n"))
    assert record.markup_code() == "def each\nend\n"
    assert record.pretty_print().splitlines() == [
        "[MethodRecord (unknown)#each",
        "  source:",
        "    def each",
        "    end]",
    ]


def test_pretty_print_falls_back_to_text() -> None:
    record = MethodRecord("raw", "each", sequence=FragmentSequence())
    assert record.pretty_print() == "[MethodRecord (unknown)#each\n  text:\n    'raw']"


def test_documented() -> None:
    assert not _method("each").documented
    assert not _method("each", comment="   ").documented
    assert _method("each", comment="Iterates.").documented
