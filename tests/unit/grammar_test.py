"""Tests for the one-statement-per-line grammar."""

import pytest

from codoc.core.errors import IncompleteInputError, ParseError
from codoc.core.grammar import (
    CodocLineParser,
    ComponentDecl,
    DirectoryDecl,
    FileDecl,
    FunctionDecl,
    NoteDecl,
    ReferenceDecl,
    VariableDecl,
    parse_line,
)


class TestStatements:
    def test_directory(self) -> None:
        assert parse_line("/services") == DirectoryDecl("services")

    def test_directory_named_like_a_variable(self) -> None:
        assert parse_line("/variables") == DirectoryDecl("variables")

    def test_file(self) -> None:
        decl = parse_line("auth.ts")
        assert decl == FileDecl("auth", ".ts")
        assert isinstance(decl, FileDecl)
        assert decl.name == "auth.ts"

    def test_file_named_like_a_variable(self) -> None:
        decl = parse_line("various.py")
        assert isinstance(decl, FileDecl)
        assert decl.name == "various.py"

    def test_component(self) -> None:
        assert parse_line("%LoginForm") == ComponentDecl("LoginForm")

    def test_function(self) -> None:
        decl = parse_line("$login()")
        assert decl == FunctionDecl("login")
        assert isinstance(decl, FunctionDecl)
        assert decl.signature == "$login()"

    def test_reference(self) -> None:
        assert parse_line("@utils.validateInput") == ReferenceDecl("utils.validateInput")

    def test_note(self) -> None:
        assert parse_line("# keep this in sync") == NoteDecl("keep this in sync")

    def test_variable_with_value(self) -> None:
        assert parse_line("varTimeout = 30") == VariableDecl("varTimeout", "30")

    def test_variable_with_string_value(self) -> None:
        assert parse_line('varMode = "strict"') == VariableDecl("varMode", '"strict"')

    def test_bare_variable(self) -> None:
        assert parse_line("varFlag") == VariableDecl("varFlag")

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_line("    $logout()   ") == FunctionDecl("logout")


class TestErrors:
    def test_identifier_without_extension(self) -> None:
        with pytest.raises(ParseError, match="Expected file extension"):
            parse_line("utils")

    def test_unknown_extension(self) -> None:
        with pytest.raises(ParseError):
            parse_line("notes.txt")

    def test_trailing_tokens(self) -> None:
        with pytest.raises(ParseError, match="after FunctionDecl"):
            parse_line("$foo() $bar()")

    def test_directory_without_name(self) -> None:
        with pytest.raises(ParseError, match="directory name"):
            parse_line("/ ")

    def test_unrecognized_statement(self) -> None:
        with pytest.raises(ParseError, match="Unrecognized statement"):
            parse_line("= 3")

    def test_variable_missing_value(self) -> None:
        with pytest.raises(ParseError, match="reached end of line"):
            parse_line("varX =")

    def test_error_carries_column(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse_line("$foo() extra.ts")
        assert exc_info.value.column == 8

    def test_empty_statement(self) -> None:
        with pytest.raises(ParseError):
            CodocLineParser().parse_tokens([])

    def test_incomplete_input_propagates(self) -> None:
        with pytest.raises(IncompleteInputError):
            parse_line("$")
