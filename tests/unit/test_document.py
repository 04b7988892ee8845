"""Unit tests for document parsing and table assembly (retoml.parser.state)."""
from __future__ import annotations

import pytest

from retoml import parse_document
from retoml.model import ArrayOfTables, Decor, Document, Formatted, Key, Table, TableKeyValue
from retoml.model.table_like import TableLike
from retoml.parser import TomlError
from retoml.parser.errors import DottedKeyExtendWrongType, DuplicateKey
from retoml.parser.state import ParseState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_error(text: str) -> TomlError:
    with pytest.raises(TomlError) as exc_info:
        parse_document(text)
    return exc_info.value


def keys(*names: str) -> list[Key]:
    return [Key(name) for name in names]


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


class TestDocumentStructure:
    def test_table_like_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            TableLike()  # type: ignore[abstract]
        assert isinstance(Table(), TableLike)

    def test_empty(self) -> None:
        doc = parse_document("")
        assert len(doc) == 0
        assert doc.trailing == ""

    def test_only_comments(self) -> None:
        doc = parse_document("# just a comment\n\n")
        assert len(doc) == 0
        assert doc.trailing == "# just a comment\n\n"

    def test_simple_keyvals(self) -> None:
        doc = parse_document('a = 1\nb = "two"\n')
        assert doc.unwrap() == {"a": 1, "b": "two"}

    def test_dotted_keys_merge(self) -> None:
        doc = parse_document("a.b.c = 1\na.b.d = 2\na.e = 3\n")
        assert doc.unwrap() == {"a": {"b": {"c": 1, "d": 2}, "e": 3}}
        a = doc["a"]
        assert isinstance(a, Table)
        assert a.dotted and a.implicit

    def test_tables(self) -> None:
        doc = parse_document("[a]\nx = 1\n[b]\ny = 2\n")
        assert doc.unwrap() == {"a": {"x": 1}, "b": {"y": 2}}
        assert doc["a"].position == 1  # type: ignore[union-attr]
        assert doc["b"].position == 2  # type: ignore[union-attr]

    def test_root_has_position_zero(self) -> None:
        assert parse_document("a = 1\n").as_table().position == 0

    def test_header_creates_implicit_parents(self) -> None:
        doc = parse_document("[a.b.c]\nx = 1\n")
        a = doc["a"]
        assert isinstance(a, Table)
        assert a.implicit and not a.dotted
        assert doc.unwrap() == {"a": {"b": {"c": {"x": 1}}}}

    def test_implicit_table_can_be_defined_later(self) -> None:
        doc = parse_document("[a.b.c]\nx = 1\n[a]\ny = 2\n")
        a = doc["a"]
        assert isinstance(a, Table)
        assert not a.implicit
        assert doc.unwrap() == {"a": {"b": {"c": {"x": 1}}, "y": 2}}

    def test_super_table_after_sub_table_keeps_both(self) -> None:
        doc = parse_document("[x.y.z.w]\na = 1\n[x]\nb = 2\n")
        assert doc.unwrap() == {"x": {"y": {"z": {"w": {"a": 1}}}, "b": 2}}

    def test_dotted_key_under_header(self) -> None:
        doc = parse_document("[fruit]\napple.color = 'red'\napple.taste.sweet = true\n")
        assert doc.unwrap() == {"fruit": {"apple": {"color": "red", "taste": {"sweet": True}}}}

    def test_array_of_tables(self) -> None:
        text = (
            "[[fruit]]\nname = 'apple'\n"
            "[fruit.physical]\ncolor = 'red'\n"
            "[[fruit.variety]]\nname = 'red delicious'\n"
            "[[fruit]]\nname = 'banana'\n"
        )
        doc = parse_document(text)
        fruit = doc["fruit"]
        assert isinstance(fruit, ArrayOfTables)
        assert len(fruit) == 2
        assert doc.unwrap() == {
            "fruit": [
                {"name": "apple", "physical": {"color": "red"}, "variety": [{"name": "red delicious"}]},
                {"name": "banana"},
            ]
        }

    def test_empty_array_tables(self) -> None:
        doc = parse_document("[[a]]\n[[a]]\n")
        assert doc.unwrap() == {"a": [{}, {}]}

    def test_bom_is_skipped(self) -> None:
        doc = parse_document("\ufeffa = 1\n")
        assert doc.unwrap() == {"a": 1}
        assert str(doc) == "a = 1\n"

    def test_header_decor(self) -> None:
        doc = parse_document("a = 1\n\n# tables\n[t]  # trailing\n")
        t = doc["t"]
        assert isinstance(t, Table)
        assert t.decor == Decor("\n# tables\n", "  # trailing")
        assert t.eol == "\n"

    def test_keyval_eol(self) -> None:
        doc = parse_document("a = 1\r\nb = 2")
        entries = list(doc.as_table().iter_kvs())
        assert [kv.eol for kv in entries] == ["\r\n", ""]

    def test_first_key_carries_leading_trivia(self) -> None:
        doc = parse_document("# header comment\n\n  a = 1\n")
        assert doc.as_table().key("a").decor.prefix == "# header comment\n\n  "

    def test_document_parse_classmethod(self) -> None:
        assert Document.parse("a = 1").unwrap() == {"a": 1}


# ---------------------------------------------------------------------------
# Key unification
# ---------------------------------------------------------------------------


class TestKeyUnification:
    def test_differently_quoted_headers_share_tables(self) -> None:
        text = "[a]\n[a.'b'.c]\n[a.\"b\".c.e]\n[a.b.c.d]\n"
        doc = parse_document(text)
        assert doc.unwrap() == {"a": {"b": {"c": {"e": {}, "d": {}}}}}
        assert str(doc) == "[a]\n[a.'b'.c]\n[a.'b'.c.e]\n[a.'b'.c.d]\n"

    def test_first_spelling_wins(self) -> None:
        doc = parse_document("[\"x\".y]\n[x.z]\n")
        assert doc.as_table().key("x").to_repr().as_raw() == '"x"'

    def test_each_header_keeps_its_own_spacing(self) -> None:
        doc = parse_document("[\"a\".b]\nx = 1\n[ a ]\ny = 2\n")
        a = doc["a"]
        assert isinstance(a, Table)
        assert a.header_path is not None
        assert a.header_path[0].decor == Decor(" ", " ")
        assert doc.as_table().key("a").decor == Decor("", "")
        assert str(doc) == "[\"a\".b]\nx = 1\n[ \"a\" ]\ny = 2\n"

    def test_quoted_and_bare_keys_collide(self) -> None:
        err = parse_error("[t]\nname = 1\n\"name\" = 2\n")
        assert isinstance(err.cause, DuplicateKey)


# ---------------------------------------------------------------------------
# Semantic errors
# ---------------------------------------------------------------------------


class TestDuplicates:
    def test_duplicate_key_in_root(self) -> None:
        err = parse_error("a = 1\na = 2\n")
        assert err.message == "duplicate key `a` in document root"

    def test_duplicate_key_in_table(self) -> None:
        err = parse_error("[a]\nb = 1\nb = 2\n")
        assert err.message == "duplicate key `b` in table `a`"
        assert err.line == 3

    def test_duplicate_dotted_key(self) -> None:
        err = parse_error("a.b = 1\na.b = 2\n")
        assert err.message == "duplicate key `b` in table `a`"

    def test_table_defined_twice(self) -> None:
        err = parse_error("[a]\nx = 1\n\n[a]\ny = 2\n")
        assert err.message == "invalid table header\nduplicate key `a` in document root"
        assert err.line == 4

    def test_sub_table_defined_twice(self) -> None:
        err = parse_error("[a.b]\n[a.b]\n")
        assert err.message == "invalid table header\nduplicate key `b` in table `a`"

    def test_table_over_value(self) -> None:
        err = parse_error("[a]\nb = 1\n[a.b]\n")
        assert isinstance(err.cause, DuplicateKey)

    def test_value_then_table(self) -> None:
        assert isinstance(parse_error("a = 1\n[a]\n").cause, DuplicateKey)

    def test_header_after_dotted_definition(self) -> None:
        assert isinstance(parse_error("[a]\nb.c = 1\n[a.b]\n").cause, DuplicateKey)

    def test_dotted_key_into_header_table(self) -> None:
        err = parse_error("[a.b]\nc = 1\n[a]\nb.d = 2\n")
        assert err.message == "duplicate key `d`"

    def test_table_then_array_of_tables(self) -> None:
        assert isinstance(parse_error("[a]\n[[a]]\n").cause, DuplicateKey)

    def test_array_of_tables_then_table(self) -> None:
        assert isinstance(parse_error("[[a]]\n[a]\n").cause, DuplicateKey)

    def test_static_array_then_array_of_tables(self) -> None:
        assert isinstance(parse_error("a = [1]\n[[a]]\n").cause, DuplicateKey)


class TestTypeConflicts:
    def test_dotted_key_through_integer(self) -> None:
        err = parse_error("a = 1\na.b = 2\n")
        assert isinstance(err.cause, DottedKeyExtendWrongType)
        assert err.message == "dotted key `a` attempted to extend non-table type (integer)"

    def test_dotted_key_through_inline_table(self) -> None:
        err = parse_error("a = { b = 1 }\na.c = 2\n")
        assert isinstance(err.cause, DottedKeyExtendWrongType)
        assert "inline table" in err.message

    def test_header_through_array(self) -> None:
        err = parse_error("a = [1]\n[a.b]\n")
        assert isinstance(err.cause, DottedKeyExtendWrongType)


# ---------------------------------------------------------------------------
# Syntax errors
# ---------------------------------------------------------------------------


class TestSyntaxErrors:
    @pytest.mark.parametrize(
        "text",
        [
            "a",
            "a =",
            "a = 1 2",
            "= 1",
            "[a",
            "[]",
            "[a]]",
            "[a] b = 1",
            "[[a]",
            "a = 1\r",
            "\r",
            "a = 1 # bad\x01comment",
            "a.= 1",
        ],
    )
    def test_invalid(self, text: str) -> None:
        parse_error(text)

    def test_missing_equals(self) -> None:
        err = parse_error("key value\n")
        assert err.message == "expected `.`, `=`"
        assert err.column == 5

    def test_missing_array_header_close(self) -> None:
        err = parse_error("[[a]\n")
        assert err.message == "invalid table header\nexpected `.`, `]]`"

    def test_text_after_value(self) -> None:
        err = parse_error('a = "x" y\n')
        assert err.message == "expected newline, `#`"
        assert err.column == 9


# ---------------------------------------------------------------------------
# ParseState
# ---------------------------------------------------------------------------


class TestParseState:
    def test_descend_path_creates_implicit_tables(self) -> None:
        root = Table()
        leaf = ParseState.descend_path(root, keys("a", "b"), dotted=True)
        a = root["a"]
        assert isinstance(a, Table)
        assert a.implicit and a.dotted
        assert a["b"] is leaf

    def test_descend_path_enters_last_array_element(self) -> None:
        root = Table()
        root["arr"] = ArrayOfTables([{"n": 1}, {"n": 2}])
        table = ParseState.descend_path(root, keys("arr"), dotted=False)
        assert table["n"].value == 2  # type: ignore[union-attr]

    def test_descend_path_through_value(self) -> None:
        root = Table({"a": "x"})
        with pytest.raises(DottedKeyExtendWrongType):
            ParseState.descend_path(root, keys("a", "b"), dotted=False)

    def test_pending_trivia_goes_to_next_key(self) -> None:
        state = ParseState()
        state.on_ws("\n")
        state.on_comment("# note\n")
        state.on_keyval([], TableKeyValue(Key("a", decor=Decor("", " ")), Formatted(1)))
        doc = state.into_document()
        assert doc.as_table().key("a").decor.prefix == "\n# note\n"

    def test_remaining_trivia_becomes_document_trailing(self) -> None:
        state = ParseState()
        state.on_keyval([], TableKeyValue(Key("a"), Formatted(1)))
        state.on_ws("\n\n")
        assert state.into_document().trailing == "\n\n"

    def test_headers_open_and_close_tables(self) -> None:
        state = ParseState()
        state.on_std_header(keys("t"), "", "\n")
        state.on_keyval([], TableKeyValue(Key("x"), Formatted(1)))
        state.on_array_header(keys("arr"), "", "\n")
        doc = state.into_document()
        assert doc.unwrap() == {"t": {"x": 1}, "arr": [{}]}

    def test_keyvals_are_numbered_in_reading_order(self) -> None:
        state = ParseState()
        state.on_keyval(keys("a"), TableKeyValue(Key("x"), Formatted(1)))
        state.on_keyval([], TableKeyValue(Key("b"), Formatted(2)))
        state.on_keyval(keys("a"), TableKeyValue(Key("y"), Formatted(3)))
        doc = state.into_document()
        positions = {kv.key.get(): kv.position for _, kv in doc.as_table().iter_leaves()}
        assert positions == {"x": 0, "b": 1, "y": 2}

    def test_header_completes_implicit_table_in_place(self) -> None:
        state = ParseState()
        state.on_std_header(keys("a", "b"), "", "\n")
        state.on_std_header(keys("a"), "", "\n")
        doc = state.into_document()
        a = doc["a"]
        assert isinstance(a, Table)
        assert not a.implicit
        assert [k.get() for k in a.header_path or []] == ["a"]
        assert a.keys() == ["b"]

    def test_duplicate_keyval(self) -> None:
        state = ParseState()
        state.on_keyval([], TableKeyValue(Key("a"), Formatted(1)))
        with pytest.raises(DuplicateKey):
            state.on_keyval([], TableKeyValue(Key("a"), Formatted(2)))
