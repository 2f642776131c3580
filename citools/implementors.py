"""
Reader for rustdoc implementor listings.

The documentation toolchain emits one script per trait
(e.g. implementors/std/io/trait.Write.js) that fills a table mapping each
library to the HTML descriptions of its implementations, then registers the
table with the page or queues it until the page is ready.
"""
import json
import re
from pathlib import Path
from typing import Dict, List


_ASSIGNMENT = re.compile(r'implementors\[("(?:[^"\\]|\\.)*")\]\s*=\s*\[')
_STRING = re.compile(r'\s*("(?:[^"\\]|\\.)*")\s*')
_SPACE = re.compile(r'\s*')

_HEADER = "(function() {var implementors = {};\n"
_TRAILER = (
    "\n"
    "\n"
    "            if (window.register_implementors) {\n"
    "                window.register_implementors(implementors);\n"
    "            } else {\n"
    "                window.pending_implementors = implementors;\n"
    "            }\n"
    "        \n"
    "})()"
)


class ImplementorParseError(Exception):
    """Raised when an implementor listing is malformed."""
    pass


def _decode(literal: str, library: str) -> str:
    try:
        return json.loads(literal)
    except json.JSONDecodeError as e:
        raise ImplementorParseError(f"Bad string literal in {library!r}: {e}") from e


def _parse_array(text: str, pos: int, library: str):
    """Parse string items after an opening '['; returns (items, end_pos)."""
    items = []
    while True:
        match = _STRING.match(text, pos)
        if not match:
            break
        items.append(_decode(match.group(1), library))
        pos = match.end()
        if text.startswith(',', pos):
            pos += 1
        else:
            break

    pos = _SPACE.match(text, pos).end()
    if not text.startswith(']', pos):
        raise ImplementorParseError(f"Unterminated implementor list for {library!r} at offset {pos}")
    return items, pos + 1


def parse_implementors(text: str) -> Dict[str, List[str]]:
    """
    Parse the implementor table out of a generated listing script.

    Library order and entry order are preserved.

    Raises:
        ImplementorParseError: If no table is found or an entry is malformed
    """
    if 'var implementors' not in text:
        raise ImplementorParseError("Not an implementor listing: no implementors table")

    table: Dict[str, List[str]] = {}
    pos = 0
    while True:
        match = _ASSIGNMENT.search(text, pos)
        if not match:
            break
        library = _decode(match.group(1), "library name")
        items, pos = _parse_array(text, match.end(), library)
        table[library] = items

    return table


def load_implementors(path: Path) -> Dict[str, List[str]]:
    """Read and parse an implementor listing file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Implementor listing not found: {path}")
    return parse_implementors(path.read_text(encoding='utf-8'))


def summarize(table: Dict[str, List[str]]) -> Dict[str, int]:
    """Number of implementations listed per library."""
    return {library: len(items) for library, items in table.items()}


def render_implementors(table: Dict[str, List[str]]) -> str:
    """Render a table back into the listing script format."""
    parts = [_HEADER]
    for library, items in table.items():
        encoded = ''.join(json.dumps(item, ensure_ascii=False) + ',' for item in items)
        parts.append(f"implementors[{json.dumps(library)}] = [{encoded}];")
    parts.append(_TRAILER)
    return ''.join(parts)
