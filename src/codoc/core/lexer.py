"""Tokenizer for a single line of CoDoc outline text."""

import re
from dataclasses import dataclass
from enum import Enum

from codoc.core.errors import IncompleteInputError, LexError

FILE_EXTENSIONS: tuple[str, ...] = (
    "ts",
    "tsx",
    "js",
    "jsx",
    "json",
    "css",
    "scss",
    "html",
    "md",
    "py",
    "java",
    "cpp",
    "c",
    "go",
    "rs",
    "rb",
    "php",
    "yaml",
    "yml",
    "xml",
    "sql",
    "sh",
    "bash",
)

_INCOMPLETE_RE = re.compile(r"^[$%@#!]{1,2}$")


class TokenType(str, Enum):
    WHITESPACE = "WhiteSpace"
    NOTE_MARKER = "NoteMarker"
    STRING_LITERAL = "StringLiteral"
    NUMBER_LITERAL = "NumberLiteral"
    COMPONENT = "Component"
    VARIABLE = "Variable"
    REFERENCE = "Reference"
    FUNCTION = "Function"
    FILE_EXTENSION = "FileExtension"
    DIRECTORY_START = "DirectoryStart"
    EQUALS = "Equals"
    IDENTIFIER = "Identifier"
    CONTENT = "Content"


@dataclass(frozen=True)
class Token:
    type: TokenType
    image: str
    offset: int


_IDENT = r"[a-zA-Z][a-zA-Z0-9_]*"
_EXTENSIONS_ALT = "|".join(sorted(FILE_EXTENSIONS, key=len, reverse=True))

# Precedence order; on equal match length the earlier rule wins.
_RULES: tuple[tuple[TokenType, re.Pattern[str]], ...] = (
    (TokenType.WHITESPACE, re.compile(r"[ \t]+")),
    (TokenType.NOTE_MARKER, re.compile(r"#")),
    (TokenType.STRING_LITERAL, re.compile(r'"[^"]*"')),
    (TokenType.NUMBER_LITERAL, re.compile(r"\d+(?:\.\d+)?")),
    (TokenType.COMPONENT, re.compile(rf"%{_IDENT}")),
    (TokenType.VARIABLE, re.compile(rf"var{_IDENT}")),
    (TokenType.REFERENCE, re.compile(rf"@{_IDENT}(?:\.{_IDENT})*")),
    (TokenType.FUNCTION, re.compile(rf"\${_IDENT}\(\)")),
    (TokenType.FILE_EXTENSION, re.compile(rf"\.(?:{_EXTENSIONS_ALT})(?![a-zA-Z0-9_])")),
    (TokenType.DIRECTORY_START, re.compile(r"/")),
    (TokenType.EQUALS, re.compile(r"=")),
    (TokenType.IDENTIFIER, re.compile(r"[a-zA-Z][a-zA-Z0-9_\-]*")),
)

_CONTENT_RE = re.compile(r"[^\n\r]+")


def is_incomplete_input(text: str) -> bool:
    """True for a lone marker prefix like ``$``, ``%``, ``@@`` or ``#``."""
    return bool(_INCOMPLETE_RE.match(text.strip()))


class CodocLexer:
    """Stateless tokenizer; one instance can be shared between threads."""

    def tokenize(self, text: str) -> list[Token]:
        if is_incomplete_input(text):
            raise IncompleteInputError(f"Incomplete input {text.strip()!r}")

        tokens: list[Token] = []
        pos = 0
        length = len(text)
        while pos < length:
            token_type, end = self._match_at(text, pos)
            if token_type is None:
                content = _CONTENT_RE.match(text, pos)
                if content is None:
                    raise LexError(f"Unexpected character {text[pos]!r} at column {pos + 1}", column=pos + 1)
                token_type, end = TokenType.CONTENT, content.end()

            if token_type is TokenType.NOTE_MARKER:
                tokens.append(Token(TokenType.NOTE_MARKER, text[pos:end], pos))
                rest = text[end:]
                stripped = rest.strip()
                if stripped:
                    start = end + len(rest) - len(rest.lstrip())
                    content = _CONTENT_RE.match(text, start)
                    if content is None or content.end() < start + len(stripped):
                        bad = content.end() if content is not None else start
                        raise LexError(f"Unexpected line break at column {bad + 1}", column=bad + 1)
                    tokens.append(Token(TokenType.CONTENT, stripped, start))
                break

            if token_type is not TokenType.WHITESPACE:
                tokens.append(Token(token_type, text[pos:end], pos))
            pos = end
        return tokens

    @staticmethod
    def _match_at(text: str, pos: int) -> tuple[TokenType | None, int]:
        best_type: TokenType | None = None
        best_end = pos
        for token_type, pattern in _RULES:
            match = pattern.match(text, pos)
            if match is not None and match.end() > best_end:
                best_type, best_end = token_type, match.end()
        return best_type, best_end


def tokenize(text: str) -> list[Token]:
    return CodocLexer().tokenize(text)
