"""Text formatting helpers shared by the report renderers.

Styling goes through `typer.style` and widths through `click.unstyle`. A
`Styler` with color disabled returns its input untouched, so plain output
never contains escape sequences.
"""

from __future__ import annotations

from dataclasses import dataclass
import difflib
from typing import Any

import click
import typer
import yaml

_NUMBER_WORDS = (
    "no",
    "one",
    "two",
    "three",
    "four",
    "five",
    "six",
    "seven",
    "eight",
    "nine",
    "ten",
    "eleven",
    "twelve",
)

_VISIBLE_WHITESPACE = {" ": "·", "\t": "→", "\n": "↵\n", "\r": "␍"}


@dataclass(frozen=True, slots=True)
class Styler:
    """Applies ANSI styling when color output is enabled."""

    color: bool = False

    def paint(
        self,
        text: str,
        *,
        fg: str | None = None,
        bold: bool = False,
        italic: bool = False,
        underline: bool = False,
        dim: bool = False,
    ) -> str:
        if not self.color or not text:
            return text
        return typer.style(
            text,
            fg=fg,
            bold=bold,
            italic=italic,
            underline=underline,
            dim=dim,
        )

    def added(self, text: str) -> str:
        return self.paint(text, fg="green")

    def removed(self, text: str) -> str:
        return self.paint(text, fg="red")

    def modified(self, text: str) -> str:
        return self.paint(text, fg="yellow")

    def heading(self, text: str) -> str:
        return self.paint(text, bold=True)

    def note(self, text: str) -> str:
        return self.paint(text, italic=True, dim=True)


def visible_width(text: str) -> int:
    return len(click.unstyle(text))


def count_word(count: int) -> str:
    if 0 <= count < len(_NUMBER_WORDS):
        return _NUMBER_WORDS[count]
    return str(count)


def plural(count: int, singular: str, plural_form: str | None = None) -> str:
    word = singular if count == 1 else (plural_form or f"{singular}s")
    return f"{count_word(count)} {word}"


def type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "map"
    if isinstance(value, list):
        return "list"
    return type(value).__name__


def render_value(value: Any) -> str:
    """Render a value as YAML-ish text without trailing newline."""
    if isinstance(value, str):
        return value if value else '""'
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list)) and not value:
        return "{}" if isinstance(value, dict) else "[]"
    rendered = yaml.safe_dump(
        value,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=1000,
    )
    if rendered.endswith("\n...\n"):
        rendered = rendered[: -len("...\n")]
    return rendered.rstrip("\n")


def render_inline_list(values: list[Any]) -> str:
    return ", ".join(render_value(value) for value in values)


def show_whitespace(text: str) -> str:
    return "".join(_VISIBLE_WHITESPACE.get(char, char) for char in text)


def is_whitespace_only_change(from_text: str, to_text: str) -> bool:
    return from_text != to_text and "".join(from_text.split()) == "".join(to_text.split())


def is_multiline(text: str) -> bool:
    return "\n" in text.rstrip("\n")


def change_ratio(from_text: str, to_text: str) -> float:
    """Fraction of characters that differ between two strings."""
    longest = max(len(from_text), len(to_text))
    if longest == 0:
        return 0.0
    matcher = difflib.SequenceMatcher(a=from_text, b=to_text, autojunk=False)
    changed = sum(
        max(i2 - i1, j2 - j1)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes()
        if tag != "equal"
    )
    return changed / longest


def highlight_changes(from_text: str, to_text: str, styler: Styler) -> tuple[str, str]:
    """Return both strings with the changed segments emphasized."""
    matcher = difflib.SequenceMatcher(a=from_text, b=to_text, autojunk=False)
    left: list[str] = []
    right: list[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        from_part = from_text[i1:i2]
        to_part = to_text[j1:j2]
        if tag == "equal":
            left.append(styler.removed(from_part))
            right.append(styler.added(to_part))
            continue
        left.append(styler.paint(from_part, fg="red", bold=True, underline=True))
        right.append(styler.paint(to_part, fg="green", bold=True, underline=True))
    return "".join(left), "".join(right)


@dataclass(frozen=True, slots=True)
class TextHunks:
    """Line-level changes between two multi-line texts."""

    lines: tuple[tuple[str, str], ...]
    inserts: int
    deletions: int


def multiline_hunks(from_text: str, to_text: str, *, context_lines: int) -> TextHunks:
    """Group changed lines with `context_lines` of surrounding context.

    Each line is a `(marker, text)` pair: `-` removed, `+` added, space for
    context and `~` for the gap between two hunks.
    """
    from_lines = from_text.splitlines()
    to_lines = to_text.splitlines()
    matcher = difflib.SequenceMatcher(a=from_lines, b=to_lines, autojunk=False)

    lines: list[tuple[str, str]] = []
    inserts = 0
    deletions = 0
    for group_index, group in enumerate(matcher.get_grouped_opcodes(context_lines)):
        if group_index:
            lines.append(("~", "[...]"))
        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                lines.extend((" ", line) for line in from_lines[i1:i2])
                continue
            if tag in ("replace", "delete"):
                lines.extend(("-", line) for line in from_lines[i1:i2])
                deletions += i2 - i1
            if tag in ("replace", "insert"):
                lines.extend(("+", line) for line in to_lines[j1:j2])
                inserts += j2 - j1
    return TextHunks(lines=tuple(lines), inserts=inserts, deletions=deletions)


def side_by_side(left: list[str], right: list[str], *, gap: int = 2) -> list[str]:
    """Lay two columns of (possibly styled) lines out next to each other."""
    left_width = max((visible_width(line) for line in left), default=0)
    rows: list[str] = []
    for idx in range(max(len(left), len(right))):
        left_cell = left[idx] if idx < len(left) else ""
        right_cell = right[idx] if idx < len(right) else ""
        padding = " " * (left_width - visible_width(left_cell) + gap)
        rows.append(f"{left_cell}{padding}{right_cell}".rstrip())
    return rows


def fits_side_by_side(left: list[str], right: list[str], *, width: int, gap: int = 2) -> bool:
    """True when both columns fit into their half of `width`."""
    column = (width - gap) // 2
    return all(visible_width(line) <= column for line in (*left, *right))
