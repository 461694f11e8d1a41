from __future__ import annotations

import re
from dataclasses import dataclass, field

"""Tokenizer for list-definition text.

Two stages:

1. lex(): characters -> Lexeme (WORD / STRING / PUNCT / STRAY) with line
   numbers. Quoted labels are single lexemes, so a label containing "],"
   cannot split an entry. A doubled quote inside a string is one literal
   quote.
2. tokenize(): lexemes -> structural tokens

       ListOpen(name)            NAME "" define {
       HeaderOpen(code, label)   _100 "Soft drinks" {   (entry followed by a block)
       BlockOpen
       Item(code, label, props)  _102 "Sparkling" [ ContainersCodes = "{_7}" ]
       BlockClose(kind)          }  or  } fix          kind: "group" | "fix"
       ListClose                 };
       Malformed(fragment)       anything else; reading resumes after the
                                 next "," or before the next "}"

Stray separators ("," ";" and unmatched "}" at the top level) are noise and
produce no token.
"""

__all__ = [
    "Lexeme",
    "ListOpen",
    "HeaderOpen",
    "BlockOpen",
    "Item",
    "BlockClose",
    "ListClose",
    "Malformed",
    "DefinitionToken",
    "lex",
    "tokenize",
]

_LEXEME_RE = re.compile(
    r'(?P<newline>\n)'
    r'|(?P<space>[ \t\r\f\v]+)'
    r'|(?P<string>"(?:[^"\n]|"")*")'
    r'|(?P<punct>[{}\[\],;=])'
    r'|(?P<stray>")'
    r'|(?P<word>[^\s"{}\[\],;=]+)'
)

DEFINE_KEYWORD = "define"
FIX_KEYWORD = "fix"


@dataclass(frozen=True)
class Lexeme:
    kind: str  # WORD | STRING | PUNCT | STRAY
    value: str
    line: int

    def is_punct(self, value: str) -> bool:
        return self.kind == "PUNCT" and self.value == value

    @property
    def is_code(self) -> bool:
        return self.kind == "WORD" and self.value.startswith("_") and len(self.value) > 1

    @property
    def unquoted(self) -> str:
        if self.kind == "STRING":
            return self.value[1:-1].replace('""', '"')
        return self.value


@dataclass(frozen=True)
class ListOpen:
    name: str
    line: int


@dataclass(frozen=True)
class HeaderOpen:
    code: str
    label: str
    line: int
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BlockOpen:
    line: int


@dataclass(frozen=True)
class Item:
    code: str
    label: str
    line: int
    properties: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class BlockClose:
    kind: str
    line: int


@dataclass(frozen=True)
class ListClose:
    line: int


@dataclass(frozen=True)
class Malformed:
    fragment: str
    line: int


DefinitionToken = ListOpen | HeaderOpen | BlockOpen | Item | BlockClose | ListClose | Malformed


def lex(text: str) -> list[Lexeme]:
    lexemes: list[Lexeme] = []
    line = 1
    for m in _LEXEME_RE.finditer(text):
        kind = m.lastgroup
        if kind == "newline":
            line += 1
            continue
        if kind == "space":
            continue
        lexemes.append(Lexeme(kind=kind.upper(), value=m.group(0), line=line))
    return lexemes


def _property_value(raw: str) -> str:
    value = raw.strip()
    if value.startswith("{") and value.endswith("}"):
        value = value[1:-1]
    return value.strip()


class _StructureReader:
    """Recursive reader over the lexeme list (nesting is at most a few levels)."""

    def __init__(self, lexemes: list[Lexeme]) -> None:
        self._lx = lexemes
        self._pos = 0
        self.tokens: list[DefinitionToken] = []

    # -- cursor helpers -------------------------------------------------
    def _peek(self, offset: int = 0) -> Lexeme | None:
        i = self._pos + offset
        return self._lx[i] if i < len(self._lx) else None

    def _advance(self) -> Lexeme:
        lexeme = self._lx[self._pos]
        self._pos += 1
        return lexeme

    def _at_end(self) -> bool:
        return self._pos >= len(self._lx)

    def _peek_punct(self, value: str) -> bool:
        lexeme = self._peek()
        return lexeme is not None and lexeme.is_punct(value)

    def _peek_word(self, value: str) -> bool:
        lexeme = self._peek()
        return lexeme is not None and lexeme.kind == "WORD" and lexeme.value.lower() == value

    def _at_list_header(self) -> bool:
        name, label, keyword = self._peek(), self._peek(1), self._peek(2)
        return (
            name is not None and name.kind == "WORD" and not name.is_code
            and label is not None and label.kind == "STRING"
            and keyword is not None and keyword.kind == "WORD"
            and keyword.value.lower() == DEFINE_KEYWORD
        )

    # -- grammar ---------------------------------------------------------
    def read(self) -> list[DefinitionToken]:
        while not self._at_end():
            lexeme = self._peek()
            if self._at_list_header():
                self._read_list()
            elif lexeme.is_code:
                self._read_entry()
            elif lexeme.kind == "PUNCT" and lexeme.value in "},;":
                self._advance()
            else:
                self._malformed(self._pos)
        return self.tokens

    def _read_list(self) -> None:
        name = self._advance()
        self._advance()  # ""
        self._advance()  # define
        self.tokens.append(ListOpen(name=name.value, line=name.line))
        if not self._peek_punct("{"):
            return
        self._advance()
        self._read_body()
        if self._peek_punct("}"):
            close = self._advance()
            if self._peek_punct(";"):
                self._advance()
            self.tokens.append(ListClose(line=close.line))

    def _read_body(self) -> None:
        while not self._at_end():
            lexeme = self._peek()
            if lexeme.is_punct("}"):
                return
            if lexeme.kind == "PUNCT" and lexeme.value in ",;":
                self._advance()
            elif lexeme.is_code:
                self._read_entry()
            else:
                self._malformed(self._pos)

    def _read_properties(self) -> dict[str, str] | None:
        """Parse `[ Key = "value" (, Key = "value")* ]`; None when malformed."""
        self._advance()  # [
        props: dict[str, str] = {}
        while not self._at_end():
            if self._peek_punct("]"):
                self._advance()
                return props
            if self._peek_punct(","):
                self._advance()
                continue
            key, eq, value = self._peek(), self._peek(1), self._peek(2)
            if (
                key is None or key.kind != "WORD"
                or eq is None or not eq.is_punct("=")
                or value is None or value.kind != "STRING"
            ):
                return None
            self._pos += 3
            props[key.value] = _property_value(value.unquoted)
        return None

    def _read_entry(self) -> None:
        start = self._pos
        code = self._advance()
        label = self._peek()
        if label is None or label.kind != "STRING":
            self._malformed(start)
            return
        self._advance()
        props: dict[str, str] = {}
        if self._peek_punct("["):
            parsed = self._read_properties()
            if parsed is None:
                self._malformed(start)
                return
            props = parsed
        if self._peek_punct("{"):
            brace = self._advance()
            self.tokens.append(HeaderOpen(code=code.value[1:], label=label.unquoted, line=code.line, properties=props))
            self.tokens.append(BlockOpen(line=brace.line))
            self._read_body()
            if self._peek_punct("}"):
                close = self._advance()
                kind = "group"
                if self._peek_word(FIX_KEYWORD):
                    self._advance()
                    kind = FIX_KEYWORD
                self.tokens.append(BlockClose(kind=kind, line=close.line))
            else:
                self.tokens.append(Malformed(fragment=f"unterminated block _{code.value[1:]}", line=code.line))
        else:
            self.tokens.append(Item(code=code.value[1:], label=label.unquoted, line=code.line, properties=props))
        if self._peek_punct(","):
            self._advance()

    def _malformed(self, start: int) -> None:
        """Skip to the next "," (consumed) or "}" (left in place) outside brackets."""
        self._pos = start
        collected: list[Lexeme] = []
        square = curly = 0
        while not self._at_end():
            lexeme = self._peek()
            if lexeme.kind == "PUNCT":
                if lexeme.value == "," and square == 0 and curly == 0:
                    self._advance()
                    break
                if lexeme.value == "}" and curly == 0:
                    break
                if lexeme.value == "[":
                    square += 1
                elif lexeme.value == "]":
                    square = max(square - 1, 0)
                elif lexeme.value == "{":
                    curly += 1
                elif lexeme.value == "}":
                    curly -= 1
            collected.append(self._advance())
        if not collected:
            # Nothing consumable before a closing brace; step over one lexeme
            if not self._at_end() and self._pos == start:
                collected.append(self._advance())
            else:
                return
        self.tokens.append(Malformed(
            fragment=" ".join(lx.value for lx in collected),
            line=collected[0].line,
        ))


def tokenize(text: str) -> list[DefinitionToken]:
    """Tokenize list-definition text into structural tokens."""
    return _StructureReader(lex(text)).read()
