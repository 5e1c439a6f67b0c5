"""Parser for the snippet template grammar used by completion resolutions.

Supported forms: `$1`, `${1}`, `${1:default}` (defaults may nest further
placeholders), `$0` as the final stop, `$NAME` / `${NAME:default}` variables,
and the escapes `\\$`, `\\}` and `\\\\`. Outside a placeholder a bare `{` or
`}` is literal text, as editors treat it.
"""

from __future__ import annotations

from dataclasses import dataclass


class SnippetSyntaxError(ValueError):
    def __init__(self, message: str, *, text: str, offset: int):
        super().__init__(f"{message} at offset {offset}: {text!r}")
        self.text = text
        self.offset = offset


@dataclass(frozen=True)
class Tabstop:
    index: int
    default: str = ""


@dataclass(frozen=True)
class Snippet:
    source: str
    tabstops: tuple[Tabstop, ...]
    variables: tuple[str, ...]
    rendered: str

    @property
    def has_final_stop(self) -> bool:
        return any(stop.index == 0 for stop in self.tabstops)

    def tab_order(self) -> list[int]:
        """Distinct tab-stop indices in visiting order; `$0` comes last."""
        indices = sorted({stop.index for stop in self.tabstops if stop.index != 0})
        if self.has_final_stop:
            indices.append(0)
        return indices

    def plain_text(self) -> str:
        return self.rendered


def _is_name_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_name_char(ch: str) -> bool:
    return _is_name_start(ch) or ch.isdigit()


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.tabstops: list[Tabstop] = []
        self.variables: list[str] = []

    def parse(self) -> Snippet:
        rendered = self._sequence(nested=False)
        return Snippet(
            source=self.text,
            tabstops=tuple(self.tabstops),
            variables=tuple(self.variables),
            rendered=rendered,
        )

    def _error(self, message: str) -> SnippetSyntaxError:
        return SnippetSyntaxError(message, text=self.text, offset=self.pos)

    def _peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        return self.text[index] if index < len(self.text) else ""

    def _sequence(self, *, nested: bool) -> str:
        out: list[str] = []
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch == "\\":
                nxt = self._peek(1)
                if nxt and nxt in "$}\\":
                    out.append(nxt)
                    self.pos += 2
                else:
                    out.append(ch)
                    self.pos += 1
            elif ch == "$":
                out.append(self._dollar())
            elif ch == "}" and nested:
                return "".join(out)
            else:
                out.append(ch)
                self.pos += 1
        if nested:
            raise self._error("unterminated placeholder")
        return "".join(out)

    def _read_int(self) -> int:
        start = self.pos
        while self._peek().isdigit():
            self.pos += 1
        return int(self.text[start:self.pos])

    def _read_name(self) -> str:
        start = self.pos
        while self._peek() and _is_name_char(self._peek()):
            self.pos += 1
        return self.text[start:self.pos]

    def _dollar(self) -> str:
        nxt = self._peek(1)
        if nxt.isdigit():
            self.pos += 1
            self.tabstops.append(Tabstop(self._read_int()))
            return ""
        if nxt and _is_name_start(nxt):
            self.pos += 1
            name = self._read_name()
            self.variables.append(name)
            return name
        if nxt != "{":
            self.pos += 1
            return "$"
        self.pos += 2
        head = self._peek()
        if head.isdigit():
            index = self._read_int()
            default = self._tail()
            self.tabstops.append(Tabstop(index, default))
            return default
        if head and _is_name_start(head):
            name = self._read_name()
            default = self._tail()
            self.variables.append(name)
            return default or name
        raise self._error("expected tab-stop index or variable name after '${'")

    def _tail(self) -> str:
        ch = self._peek()
        if ch == "}":
            self.pos += 1
            return ""
        if ch != ":":
            raise self._error("expected ':' or '}' in placeholder")
        self.pos += 1
        default = self._sequence(nested=True)
        # _sequence(nested=True) only returns when it sits on the closing brace.
        self.pos += 1
        return default


def parse_snippet(text: str) -> Snippet:
    return _Parser(text).parse()


def escape(text: str) -> str:
    """Escape literal text so it survives as-is inside a snippet template."""
    return text.replace("\\", "\\\\").replace("$", "\\$").replace("}", "\\}")
