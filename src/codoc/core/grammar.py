"""Statement grammar for one tokenized CoDoc line.

Each line is exactly one of seven statement shapes::

    /name            DirectoryDecl
    name.ext         FileDecl
    %Name            ComponentDecl
    $name()          FunctionDecl
    varName = value  VariableDecl
    @name(.name)*    ReferenceDecl
    # free text      NoteDecl
"""

from dataclasses import dataclass

from codoc.core.errors import ParseError
from codoc.core.lexer import CodocLexer, Token, TokenType


@dataclass(frozen=True)
class DirectoryDecl:
    name: str


@dataclass(frozen=True)
class FileDecl:
    stem: str
    extension: str

    @property
    def name(self) -> str:
        return self.stem + self.extension


@dataclass(frozen=True)
class ComponentDecl:
    name: str


@dataclass(frozen=True)
class FunctionDecl:
    name: str

    @property
    def signature(self) -> str:
        return f"${self.name}()"


@dataclass(frozen=True)
class VariableDecl:
    name: str
    value: str | None = None


@dataclass(frozen=True)
class ReferenceDecl:
    name: str


@dataclass(frozen=True)
class NoteDecl:
    text: str


Statement = DirectoryDecl | FileDecl | ComponentDecl | FunctionDecl | VariableDecl | ReferenceDecl | NoteDecl

_NAME_TOKENS = (TokenType.IDENTIFIER, TokenType.VARIABLE)
_VALUE_TOKENS = (TokenType.STRING_LITERAL, TokenType.NUMBER_LITERAL, TokenType.IDENTIFIER)


class _TokenCursor:
    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def peek(self) -> Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def take(self, *types: TokenType, expected: str) -> Token:
        token = self.peek()
        if token is None:
            raise ParseError(f"Expected {expected} but reached end of line")
        if token.type not in types:
            raise ParseError(
                f"Expected {expected} but found {token.image!r} ({token.type.value})",
                column=token.offset + 1,
            )
        self._pos += 1
        return token

    def expect_end(self, statement: str) -> None:
        token = self.peek()
        if token is not None:
            raise ParseError(
                f"Unexpected {token.image!r} ({token.type.value}) after {statement}",
                column=token.offset + 1,
            )


class CodocLineParser:
    """Recognizes one statement per line. Holds no per-call state."""

    def __init__(self, lexer: CodocLexer | None = None) -> None:
        self._lexer = lexer or CodocLexer()

    def parse_line(self, text: str) -> Statement:
        return self.parse_tokens(self._lexer.tokenize(text.strip()))

    def parse_tokens(self, tokens: list[Token]) -> Statement:
        cursor = _TokenCursor(tokens)
        first = cursor.peek()
        if first is None:
            raise ParseError("Empty statement")

        statement: Statement
        if first.type is TokenType.DIRECTORY_START:
            cursor.take(TokenType.DIRECTORY_START, expected="'/'")
            name = cursor.take(*_NAME_TOKENS, expected="directory name")
            statement = DirectoryDecl(name.image)
        elif first.type in _NAME_TOKENS and self._is_file(tokens):
            stem = cursor.take(*_NAME_TOKENS, expected="file name")
            ext = cursor.take(TokenType.FILE_EXTENSION, expected="file extension")
            statement = FileDecl(stem.image, ext.image)
        elif first.type is TokenType.COMPONENT:
            statement = ComponentDecl(cursor.take(TokenType.COMPONENT, expected="component").image[1:])
        elif first.type is TokenType.FUNCTION:
            statement = FunctionDecl(cursor.take(TokenType.FUNCTION, expected="function").image[1:-2])
        elif first.type is TokenType.VARIABLE:
            name = cursor.take(TokenType.VARIABLE, expected="variable")
            value: str | None = None
            if cursor.peek() is not None:
                cursor.take(TokenType.EQUALS, expected="'='")
                value = cursor.take(*_VALUE_TOKENS, expected="string, number or identifier value").image
            statement = VariableDecl(name.image, value)
        elif first.type is TokenType.REFERENCE:
            statement = ReferenceDecl(cursor.take(TokenType.REFERENCE, expected="reference").image[1:])
        elif first.type is TokenType.NOTE_MARKER:
            cursor.take(TokenType.NOTE_MARKER, expected="'#'")
            statement = NoteDecl(cursor.take(TokenType.CONTENT, expected="note text").image)
        elif first.type is TokenType.IDENTIFIER:
            raise ParseError(
                f"Expected file extension after {first.image!r} (one of the known extensions)",
                column=first.offset + len(first.image) + 1,
            )
        else:
            raise ParseError(f"Unrecognized statement starting with {first.image!r}", column=first.offset + 1)

        cursor.expect_end(type(statement).__name__)
        return statement

    @staticmethod
    def _is_file(tokens: list[Token]) -> bool:
        return len(tokens) > 1 and tokens[1].type is TokenType.FILE_EXTENSION


def parse_line(text: str) -> Statement:
    return CodocLineParser().parse_line(text)
