# drizzle_gen/services/source_parser.py
"""Tokenizer and recursive-descent parser for generated Drizzle source.

Only the subset of TypeScript that the generators emit is understood:
import lines, one ``export const`` declaration per file (pgEnum, helper
object or pgTable), builder calls with literal arguments and the fixed
chain of column qualifiers. Anything else is rejected with a
``SourceDecodeError`` that names the offending position; hand-edited
files with computed expressions or comments inside declarations are not
supported.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from drizzle_gen.utils.exceptions import SourceDecodeError

_TOKEN_SPEC = [
    ("SPACE", r"\s+"),
    ("COMMENT", r"//[^\n]*"),
    ("SPREAD", r"\.\.\."),
    ("ARROW", r"=>"),
    ("NUMBER", r"-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?"),
    ("STRING", r"'(?:\\.|[^'\\\n])*'"),
    ("TEMPLATE", r"`[^`]*`"),
    ("IDENT", r"[A-Za-z_$][\w$]*"),
    ("PUNCT", r"[(){}\[\],:;.=]"),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{name}>{pattern})" for name, pattern in _TOKEN_SPEC))
_ESCAPE_RE = re.compile(r"\\(.)")
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}
_QUOTED = {"\\": "\\\\", "'": "\\'", "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_OPENERS = {"(": ")", "{": "}", "[": "]"}


@dataclass(frozen=True)
class Token:
    kind: str
    value: Any
    start: int
    end: int


@dataclass(frozen=True)
class SqlTemplate:
    """A ``sql`...``` tagged template argument."""

    text: str


@dataclass(frozen=True)
class ColumnRef:
    """A ``table.column`` member access, bare or behind ``() =>``."""

    table: str
    column: str


@dataclass(frozen=True)
class Call:
    name: str
    args: list = field(default_factory=list)


@dataclass(frozen=True)
class ColumnDecl:
    """``key: builder(args).qualifier(args)...``"""

    key: str
    builder: Call
    chain: list[Call] = field(default_factory=list)


@dataclass(frozen=True)
class HelperSpread:
    name: str


@dataclass(frozen=True)
class ColumnSource:
    """Raw text of one column entry inside an object body."""

    text: str


BodyEntry = Union[HelperSpread, ColumnSource]


@dataclass(frozen=True)
class EnumDecl:
    name: str
    db_name: str
    values: list[str]


@dataclass(frozen=True)
class HelperDecl:
    name: str
    body: list[BodyEntry]


@dataclass(frozen=True)
class TableDecl:
    variable: str
    db_name: str
    body: list[BodyEntry]
    composite_key: Optional[list[str]] = None


def quote(value: str) -> str:
    """Render a single-quoted string literal."""
    escaped = "".join(_QUOTED.get(char, char) for char in value)
    return f"'{escaped}'"


def tokenize(source: str) -> list[Token]:
    """Split source text into tokens, dropping whitespace and line comments."""
    tokens = []
    pos = 0
    while pos < len(source):
        match = _TOKEN_RE.match(source, pos)
        if not match:
            raise SourceDecodeError(
                f"Unexpected character {source[pos]!r}", source=source, position=pos
            )
        kind = match.lastgroup
        text = match.group()
        pos = match.end()
        if kind in ("SPACE", "COMMENT"):
            continue
        if kind == "STRING":
            value: Any = _ESCAPE_RE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), text[1:-1])
        elif kind == "TEMPLATE":
            value = text[1:-1]
        elif kind == "NUMBER":
            value = float(text) if any(c in text for c in ".eE") else int(text)
        else:
            value = text
        tokens.append(Token(kind, value, match.start(), match.end()))
    tokens.append(Token("EOF", None, len(source), len(source)))
    return tokens


class SourceParser:
    """Recursive-descent parser over the token stream of one source text."""

    def __init__(self, source: str):
        self.source = source
        self.tokens = tokenize(source)
        self.index = 0

    # -- token helpers -------------------------------------------------

    def peek(self, offset: int = 0) -> Token:
        return self.tokens[min(self.index + offset, len(self.tokens) - 1)]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != "EOF":
            self.index += 1
        return token

    def check(self, kind: str, value: Any = None) -> bool:
        token = self.peek()
        return token.kind == kind and (value is None or token.value == value)

    def accept(self, kind: str, value: Any = None) -> Optional[Token]:
        if self.check(kind, value):
            return self.advance()
        return None

    def expect(self, kind: str, value: Any = None) -> Token:
        token = self.peek()
        if not self.check(kind, value):
            wanted = repr(value) if value is not None else kind
            found = repr(token.value) if token.value is not None else token.kind
            raise SourceDecodeError(
                f"Expected {wanted} but found {found}",
                source=self.source,
                position=token.start,
            )
        return self.advance()

    def error(self, message: str) -> SourceDecodeError:
        return SourceDecodeError(message, source=self.source, position=self.peek().start)

    # -- column grammar ------------------------------------------------

    def parse_column(self) -> ColumnDecl:
        key = self.expect("IDENT").value
        self.expect("PUNCT", ":")
        builder = self.parse_call()
        chain = []
        while self.accept("PUNCT", "."):
            chain.append(self.parse_call())
        self.expect("EOF")
        return ColumnDecl(key=key, builder=builder, chain=chain)

    def parse_call(self) -> Call:
        name = self.expect("IDENT").value
        self.expect("PUNCT", "(")
        args = []
        if not self.check("PUNCT", ")"):
            args.append(self.parse_argument())
            while self.accept("PUNCT", ","):
                args.append(self.parse_argument())
        self.expect("PUNCT", ")")
        return Call(name=name, args=args)

    def parse_argument(self) -> Any:
        token = self.peek()
        if token.kind in ("STRING", "NUMBER"):
            return self.advance().value
        if token.kind == "IDENT":
            if token.value in ("true", "false"):
                self.advance()
                return token.value == "true"
            if token.value == "sql" and self.peek(1).kind == "TEMPLATE":
                self.advance()
                return SqlTemplate(self.advance().value)
            raise self.error(f"Unsupported identifier argument {token.value!r}")
        if self.check("PUNCT", "{"):
            return self.parse_object()
        if self.check("PUNCT", "("):
            self.advance()
            self.expect("PUNCT", ")")
            self.expect("ARROW")
            return self.parse_member()
        raise self.error("Unsupported argument")

    def parse_object(self) -> dict:
        self.expect("PUNCT", "{")
        result = {}
        while not self.check("PUNCT", "}"):
            key = self.expect("IDENT").value
            self.expect("PUNCT", ":")
            result[key] = self.parse_argument()
            if not self.accept("PUNCT", ","):
                break
        self.expect("PUNCT", "}")
        return result

    def parse_member(self) -> ColumnRef:
        table = self.expect("IDENT").value
        self.expect("PUNCT", ".")
        column = self.expect("IDENT").value
        return ColumnRef(table=table, column=column)

    # -- entity grammar ------------------------------------------------

    def skip_imports(self) -> None:
        while self.check("IDENT", "import"):
            while not self.accept("PUNCT", ";"):
                if self.check("EOF"):
                    raise self.error("Unterminated import statement")
                self.advance()

    def parse_export_head(self) -> str:
        self.skip_imports()
        self.expect("IDENT", "export")
        self.expect("IDENT", "const")
        name = self.expect("IDENT").value
        self.expect("PUNCT", "=")
        return name

    def finish(self) -> None:
        self.expect("PUNCT", ";")
        self.expect("EOF")

    def parse_enum(self) -> EnumDecl:
        name = self.parse_export_head()
        self.expect("IDENT", "pgEnum")
        self.expect("PUNCT", "(")
        db_name = self.expect("STRING").value
        self.expect("PUNCT", ",")
        self.expect("PUNCT", "[")
        values = []
        while not self.check("PUNCT", "]"):
            values.append(self.expect("STRING").value)
            if not self.accept("PUNCT", ","):
                break
        self.expect("PUNCT", "]")
        self.expect("IDENT", "as")
        self.expect("IDENT", "const")
        self.expect("PUNCT", ")")
        self.finish()
        if not values:
            raise self.error("Enum declares no values")
        return EnumDecl(name=name, db_name=db_name, values=values)

    def parse_helper(self) -> HelperDecl:
        name = self.parse_export_head()
        body = self.parse_body()
        self.finish()
        return HelperDecl(name=name, body=body)

    def parse_table(self) -> TableDecl:
        variable = self.parse_export_head()
        self.expect("IDENT", "pgTable")
        self.expect("PUNCT", "(")
        db_name = self.expect("STRING").value
        self.expect("PUNCT", ",")
        body = self.parse_body()
        composite_key = None
        if self.accept("PUNCT", ","):
            composite_key = self.parse_composite_key()
        self.expect("PUNCT", ")")
        self.finish()
        return TableDecl(
            variable=variable,
            db_name=db_name,
            body=body,
            composite_key=composite_key,
        )

    def parse_composite_key(self) -> list[str]:
        """``(t) => ({ compositePK: primaryKey({ columns: [t.a, t.b] }) })``"""
        self.expect("PUNCT", "(")
        binding = self.expect("IDENT").value
        self.expect("PUNCT", ")")
        self.expect("ARROW")
        self.expect("PUNCT", "(")
        self.expect("PUNCT", "{")
        self.expect("IDENT")
        self.expect("PUNCT", ":")
        self.expect("IDENT", "primaryKey")
        self.expect("PUNCT", "(")
        self.expect("PUNCT", "{")
        self.expect("IDENT", "columns")
        self.expect("PUNCT", ":")
        self.expect("PUNCT", "[")
        columns = []
        while not self.check("PUNCT", "]"):
            member = self.parse_member()
            if member.table != binding:
                raise self.error(f"Composite key column must use binding {binding!r}")
            columns.append(member.column)
            if not self.accept("PUNCT", ","):
                break
        self.expect("PUNCT", "]")
        self.expect("PUNCT", "}")
        self.expect("PUNCT", ")")
        self.expect("PUNCT", "}")
        self.expect("PUNCT", ")")
        return columns

    def parse_body(self) -> list[BodyEntry]:
        """Split ``{ ... }`` into helper spreads and raw column entries."""
        self.expect("PUNCT", "{")
        entries: list[BodyEntry] = []
        while not self.check("PUNCT", "}"):
            if self.accept("SPREAD"):
                entries.append(HelperSpread(self.expect("IDENT").value))
            else:
                entries.append(ColumnSource(self._scan_entry()))
            if not self.accept("PUNCT", ","):
                break
        self.expect("PUNCT", "}")
        return entries

    def _scan_entry(self) -> str:
        first = self.peek()
        closers: list[str] = []
        last = first
        while True:
            token = self.peek()
            if token.kind == "EOF":
                raise self.error("Unterminated object body")
            if token.kind == "PUNCT":
                if not closers and token.value in (",", "}"):
                    break
                if token.value in _OPENERS:
                    closers.append(_OPENERS[token.value])
                elif token.value in (")", "}", "]"):
                    if not closers or closers.pop() != token.value:
                        raise self.error(f"Unbalanced {token.value!r}")
            last = self.advance()
        if last is first and first.kind == "PUNCT":
            raise self.error("Empty entry in object body")
        return self.source[first.start:last.end].strip()


def parse_column(source: str) -> ColumnDecl:
    return SourceParser(source).parse_column()


def parse_enum(source: str) -> EnumDecl:
    return SourceParser(source).parse_enum()


def parse_helper(source: str) -> HelperDecl:
    return SourceParser(source).parse_helper()


def parse_table(source: str) -> TableDecl:
    return SourceParser(source).parse_table()
