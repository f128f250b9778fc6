"""Inline span formatting for a single line of markup.

Spans are resolved with a small explicit-stack tokenizer over delimiter runs
rather than a cascade of regex substitutions:

- Text is HTML-escaped first, so the output is always safe markup.
- A backtick opens a code span that the next backtick closes. Code content
  is never searched for emphasis. Empty or unmatched backticks stay literal.
- A run of ``*`` or ``_`` first looks for an open delimiter of the same
  character and exactly the run's width, so spans of the other width nest
  (``*a **b** c*``). Failing that, a run followed by text opens a nested
  span of its full width. Otherwise the run closes the nearest open
  delimiter of the same character when that opener fits inside the run.
  A span never closes empty, and openers left between an opener and its
  closer become literal text. Whatever is left of the run opens new
  delimiters, two characters first, then one.
- Width-2 delimiters render ``<strong>``, width-1 delimiters render ``<em>``.
  Delimiters never closed stay literal.

Overlapping markers therefore resolve left to right, e.g.
``*a**b*c**`` becomes ``<em>a**b</em>c**``.
"""

from dataclasses import dataclass
from typing import Optional, Union


HTML_ESCAPES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)

EMPHASIS_CHARS = "*_"
CODE_CHAR = "`"
EMPHASIS_TAGS = {1: "em", 2: "strong"}


def escape_html(text: str) -> str:
    """Escape the five markup-significant characters.

    Ampersands go first so entities produced here are not escaped twice
    within one call. Calling this on already-escaped text escapes again.
    """
    for char, entity in HTML_ESCAPES:
        text = text.replace(char, entity)
    return text


@dataclass
class _Delimiter:
    """An emphasis delimiter that has been opened but not yet closed."""

    char: str
    width: int

    @property
    def literal(self) -> str:
        return self.char * self.width


_Part = Union[str, _Delimiter]


class InlineFormatter:
    """Turn one line of markup into safe HTML with inline spans applied."""

    def format(self, line: str) -> str:
        """Format a single line.

        Args:
            line: Raw markup text (one physical line)

        Returns:
            Escaped HTML with <code>, <strong> and <em> spans
        """
        text = escape_html(line)
        parts: list[_Part] = []
        stack: list[int] = []
        pos = 0

        while pos < len(text):
            char = text[pos]

            if char == CODE_CHAR:
                end = text.find(CODE_CHAR, pos + 1)
                if end > pos + 1:
                    parts.append(f"<code>{text[pos + 1:end]}</code>")
                    pos = end + 1
                else:
                    parts.append(char)
                    pos += 1
                continue

            if char in EMPHASIS_CHARS:
                end = pos
                while end < len(text) and text[end] == char:
                    end += 1
                can_open = end < len(text) and not text[end].isspace()
                self._handle_run(char, end - pos, parts, stack, can_open)
                pos = end
                continue

            end = pos
            while end < len(text) and text[end] not in EMPHASIS_CHARS + CODE_CHAR:
                end += 1
            parts.append(text[pos:end])
            pos = end

        return "".join(
            part.literal if isinstance(part, _Delimiter) else part
            for part in parts
        )

    def _handle_run(
        self,
        char: str,
        count: int,
        parts: list[_Part],
        stack: list[int],
        can_open: bool = False,
    ) -> None:
        """Consume a delimiter run, closing and opening spans as it goes.

        Args:
            char: The delimiter character
            count: Length of the run
            parts: Output parts collected so far
            stack: Indexes of open delimiters in parts
            can_open: Whether non-space text follows the run
        """
        while count > 0:
            depth = None
            if count <= 2:
                depth = self._find_opener(char, parts, stack, width=count)
                if (
                    depth is None
                    and can_open
                    and self._find_opener(char, parts, stack) is not None
                ):
                    # A span of another width nests inside the open one
                    self._open(char, count, parts, stack)
                    return
            if depth is None:
                depth = self._find_opener(char, parts, stack)

            if depth is not None:
                closed = self._close(depth, count, parts, stack)
                if closed:
                    count -= closed
                    continue

            width = 2 if count >= 2 else 1
            self._open(char, width, parts, stack)
            count -= width

    @staticmethod
    def _open(char: str, width: int, parts: list[_Part], stack: list[int]) -> None:
        stack.append(len(parts))
        parts.append(_Delimiter(char=char, width=width))

    @staticmethod
    def _close(depth: int, count: int, parts: list[_Part], stack: list[int]) -> int:
        """Close the opener at depth, returning the width consumed (0 if it can't)."""
        index = stack[depth]
        opener = parts[index]
        # Empty spans like "****" are not emphasis
        if opener.width > count or index == len(parts) - 1:
            return 0
        for stale in stack[depth + 1:]:
            parts[stale] = parts[stale].literal
        del stack[depth:]
        tag = EMPHASIS_TAGS[opener.width]
        parts[index] = f"<{tag}>"
        parts.append(f"</{tag}>")
        return opener.width

    @staticmethod
    def _find_opener(
        char: str,
        parts: list[_Part],
        stack: list[int],
        width: Optional[int] = None,
    ) -> Optional[int]:
        """Return the stack depth of the nearest open delimiter using char.

        When width is given only delimiters of exactly that width match.
        """
        for depth in range(len(stack) - 1, -1, -1):
            opener = parts[stack[depth]]
            if opener.char == char and (width is None or opener.width == width):
                return depth
        return None


_default_formatter = InlineFormatter()


def format_inline(line: str) -> str:
    """Format one line with the shared InlineFormatter."""
    return _default_formatter.format(line)
