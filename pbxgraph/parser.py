"""
Parser for Xcode project files (.pbxproj).

Reads the old-style property list dialect Xcode writes into a ProjectDocument.
Scalars are kept as the exact text found in the file (quotes included) so that
writing a parsed project back out reproduces it. A `/* label */` comment that
follows a value is kept with the value as a Reference; a comment that follows
an identifier in the objects dictionary becomes the section comment for that
record.
"""

import re
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple

from pbxgraph.errors import PbxSyntaxError, Position, SourceLocation
from pbxgraph.model import ProjectDocument, Reference, Section
from pbxgraph.utils import unquote


class TokenKind(Enum):
    LBRACE = auto()
    RBRACE = auto()
    LPAREN = auto()
    RPAREN = auto()
    EQUALS = auto()
    SEMICOLON = auto()
    COMMA = auto()
    STRING = auto()
    WORD = auto()
    COMMENT = auto()
    EOF = auto()


class Token:
    __slots__ = ("kind", "value", "start", "end")

    def __init__(self, kind: TokenKind, value: str, start: int, end: int) -> None:
        self.kind = kind
        self.value = value
        self.start = start
        self.end = end

    def __repr__(self) -> str:
        return f"Token({self.kind}, {self.value!r}, start={self.start})"


_PUNCTUATION = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "=": TokenKind.EQUALS,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
}

# Display names used in error messages
_DESCRIPTIONS = {
    TokenKind.LBRACE: '"{"',
    TokenKind.RBRACE: '"}"',
    TokenKind.LPAREN: '"("',
    TokenKind.RPAREN: '")"',
    TokenKind.EQUALS: '"="',
    TokenKind.SEMICOLON: '";"',
    TokenKind.COMMA: '","',
    TokenKind.STRING: "string",
    TokenKind.WORD: "identifier",
    TokenKind.COMMENT: "comment",
    TokenKind.EOF: "end of input",
}

_WORD_RE = re.compile(r'(?:[^\s{}();,="/]|/(?![/*]))+')
_SECTION_RE = re.compile(r"^(Begin|End) (\S+) section$")


def _position(text: str, offset: int) -> Position:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return Position(offset=offset, line=line, column=column)


def _error(
    text: str, message: str, expected: List[str], found: Optional[str], start: int, end: int
) -> PbxSyntaxError:
    location = SourceLocation(start=_position(text, start), end=_position(text, end))
    return PbxSyntaxError(message, expected, found, location)


def tokenize(text: str) -> Tuple[Optional[str], List[Token]]:
    """
    Split project text into tokens.

    Returns:
        The head comment (text of a leading `//` line, without the slashes)
        and the token list, always terminated by an EOF token.
    """
    tokens: List[Token] = []
    head_comment: Optional[str] = None
    i = 0
    n = len(text)

    while i < n:
        c = text[i]

        if c in " \t\r\n":
            i += 1
            continue

        # Line comments; only the first one before any token is kept
        if text.startswith("//", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            if not tokens and head_comment is None:
                head_comment = text[i + 2 : end].strip()
            i = end
            continue

        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                raise _error(text, "Unterminated comment", ['"*/"'], None, i, n)
            tokens.append(Token(TokenKind.COMMENT, text[i + 2 : end].strip(), i, end + 2))
            i = end + 2
            continue

        if c == '"':
            j = i + 1
            while j < n and text[j] != '"':
                j += 2 if text[j] == "\\" else 1
            if j >= n:
                raise _error(text, "Unterminated string", ['"\\""'], None, i, n)
            tokens.append(Token(TokenKind.STRING, text[i : j + 1], i, j + 1))
            i = j + 1
            continue

        kind = _PUNCTUATION.get(c)
        if kind is not None:
            tokens.append(Token(kind, c, i, i + 1))
            i += 1
            continue

        m = _WORD_RE.match(text, i)
        if m is None:
            raise _error(text, f"Unexpected character {c!r}", ["value"], c, i, i + 1)
        tokens.append(Token(TokenKind.WORD, m.group(0), i, m.end()))
        i = m.end()

    tokens.append(Token(TokenKind.EOF, "", n, n))
    return head_comment, tokens


class Parser:
    """Recursive descent parser over the token list."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.head_comment, self.tokens = tokenize(text)
        self.pos = 0

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.kind != TokenKind.EOF:
            self.pos += 1
        return token

    def _fail(self, expected: List[TokenKind]) -> PbxSyntaxError:
        token = self._peek()
        names = [_DESCRIPTIONS[kind] for kind in expected]
        found = None if token.kind == TokenKind.EOF else token.value
        shown = "end of input" if found is None else repr(found)
        message = f"Expected {' or '.join(names)} but found {shown}"
        return _error(self.text, message, names, found, token.start, token.end)

    def _expect(self, *kinds: TokenKind) -> Token:
        if self._peek().kind not in kinds:
            raise self._fail(list(kinds))
        return self._advance()

    def _comment(self) -> Optional[str]:
        if self._peek().kind == TokenKind.COMMENT:
            return self._advance().value
        return None

    def _skip_comments(self) -> List[str]:
        comments = []
        while self._peek().kind == TokenKind.COMMENT:
            comments.append(self._advance().value)
        return comments

    def parse(self) -> ProjectDocument:
        self._skip_comments()
        root = self._dict(top_level=True)
        self._skip_comments()
        self._expect(TokenKind.EOF)
        return ProjectDocument(project=root, head_comment=self.head_comment)

    def _dict(self, top_level: bool = False) -> Dict[str, Any]:
        self._expect(TokenKind.LBRACE)
        result: Dict[str, Any] = {}
        while True:
            self._skip_comments()
            if self._peek().kind == TokenKind.RBRACE:
                self._advance()
                return result
            key = self._expect(TokenKind.WORD, TokenKind.STRING).value
            key_comment = self._comment()
            self._expect(TokenKind.EQUALS)
            if top_level and key == "objects":
                result[key] = self._objects()
            else:
                value = self._value()
                if key_comment is not None and not isinstance(value, (dict, list, Reference)):
                    value = Reference(value, key_comment)
                result[key] = value
            self._expect(TokenKind.SEMICOLON)

    def _objects(self) -> Dict[str, Section]:
        self._expect(TokenKind.LBRACE)
        sections: Dict[str, Section] = {}
        while True:
            for comment in self._skip_comments():
                m = _SECTION_RE.match(comment)
                if m and m.group(1) == "Begin":
                    sections.setdefault(m.group(2), Section())
            if self._peek().kind == TokenKind.RBRACE:
                self._advance()
                return sections
            key_token = self._expect(TokenKind.WORD, TokenKind.STRING)
            key_comment = self._comment()
            self._expect(TokenKind.EQUALS)
            if self._peek().kind != TokenKind.LBRACE:
                raise self._fail([TokenKind.LBRACE])
            record = self._dict()
            self._expect(TokenKind.SEMICOLON)
            isa = record.get("isa")
            if isa is None:
                raise _error(
                    self.text,
                    f"Object {key_token.value} has no isa",
                    ["isa"],
                    key_token.value,
                    key_token.start,
                    key_token.end,
                )
            isa_name = unquote(isa.id if isinstance(isa, Reference) else isa)
            sections.setdefault(isa_name, Section()).add(key_token.value, record, key_comment)

    def _list(self) -> List[Any]:
        self._expect(TokenKind.LPAREN)
        items: List[Any] = []
        while True:
            self._skip_comments()
            if self._peek().kind == TokenKind.RPAREN:
                self._advance()
                return items
            items.append(self._value())
            self._skip_comments()
            if self._peek().kind != TokenKind.RPAREN:
                self._expect(TokenKind.COMMA)

    def _value(self) -> Any:
        token = self._peek()
        if token.kind == TokenKind.LBRACE:
            return self._dict()
        if token.kind == TokenKind.LPAREN:
            return self._list()
        if token.kind in (TokenKind.WORD, TokenKind.STRING):
            self._advance()
            comment = self._comment()
            if comment is not None:
                return Reference(token.value, comment)
            return token.value
        raise self._fail(
            [TokenKind.LBRACE, TokenKind.LPAREN, TokenKind.STRING, TokenKind.WORD]
        )


def parse_project(text: str) -> ProjectDocument:
    """
    Parse the text of a project.pbxproj file.

    Raises:
        PbxSyntaxError: If the text is not a valid project file.
    """
    return Parser(text).parse()
