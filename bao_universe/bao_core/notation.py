"""
Compact text notation for forms.

    ( ... )   round boundary
    [ ... ]   square boundary
    < ... >   angle boundary
    x, foo_1  atom with that label
    'a b'     atom with an arbitrary label (backslash escapes ' and \\)

Juxtaposition is the forest. Example: "(a [b c]) <a>".
"""

from typing import List, Tuple

from .form import create_form
from .signature import canonical_signature
from .types import BoundaryType, Forest, Form

OPENERS = {"(": BoundaryType.ROUND, "[": BoundaryType.SQUARE, "<": BoundaryType.ANGLE}
CLOSERS = {BoundaryType.ROUND: ")", BoundaryType.SQUARE: "]", BoundaryType.ANGLE: ">"}
OPENER_FOR = {boundary: opener for opener, boundary in OPENERS.items()}


class NotationError(ValueError):
    """Raised when form notation cannot be parsed."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} at position {position}")


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def skip_space(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def parse_sequence(self, closer: str) -> List[Form]:
        forms: List[Form] = []
        while True:
            self.skip_space()
            if self.pos >= len(self.text):
                if closer:
                    raise NotationError(f"Expected '{closer}'", self.pos)
                return forms
            ch = self.text[self.pos]
            if closer and ch == closer:
                self.pos += 1
                return forms
            forms.append(self.parse_form())

    def parse_form(self) -> Form:
        ch = self.text[self.pos]
        if ch in OPENERS:
            boundary = OPENERS[ch]
            self.pos += 1
            children = self.parse_sequence(CLOSERS[boundary])
            return create_form(boundary, *children)
        if ch == "'":
            return create_form(BoundaryType.ATOM, label=self.parse_quoted())
        if _is_ident_start(ch):
            start = self.pos
            while self.pos < len(self.text) and _is_ident_char(self.text[self.pos]):
                self.pos += 1
            return create_form(BoundaryType.ATOM, label=self.text[start:self.pos])
        raise NotationError(f"Unexpected character '{ch}'", self.pos)

    def parse_quoted(self) -> str:
        start = self.pos
        self.pos += 1
        chars: List[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == "\\" and self.pos + 1 < len(self.text):
                chars.append(self.text[self.pos + 1])
                self.pos += 2
                continue
            if ch == "'":
                self.pos += 1
                if not chars:
                    raise NotationError("Empty atom label", start)
                return "".join(chars)
            chars.append(ch)
            self.pos += 1
        raise NotationError("Unterminated quoted label", start)


def parse_forest(text: str) -> Forest:
    """
    Parse notation into a forest of fresh forms.

    Raises:
        NotationError: On unbalanced or unknown characters
    """
    return tuple(_Parser(text).parse_sequence(""))


def parse_form(text: str) -> Form:
    """Parse notation holding exactly one top-level form."""
    forest = parse_forest(text)
    if len(forest) != 1:
        raise NotationError(f"Expected exactly one form, found {len(forest)}", 0)
    return forest[0]


def _format_label(label: str) -> str:
    if _is_ident_start(label[0]) and all(_is_ident_char(ch) for ch in label):
        return label
    escaped = label.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _join(parts: List[str]) -> str:
    out = ""
    for part in parts:
        if out and _is_ident_char(out[-1]) and _is_ident_char(part[0]):
            out += " "
        out += part
    return out


def format_form(form: Form, canonical: bool = False) -> str:
    """
    Render a form in notation.

    Args:
        canonical: Sort children by canonical signature so that equal
            structures render identically
    """
    if form.label is not None:
        return _format_label(form.label)
    return OPENER_FOR[form.boundary] + format_forest(form.children, canonical) + CLOSERS[form.boundary]


def format_forest(forest: Tuple[Form, ...], canonical: bool = False) -> str:
    forms = list(forest)
    if canonical:
        forms.sort(key=canonical_signature)
    return _join([format_form(form, canonical) for form in forms])
