"""
Documentation helpers: turn metaModel documentation strings into LuaCATS comment lines.
"""
import re
from typing import List, Optional

COMMENT_PREFIX = '---'

# U+200B shows up in upstream docs (e.g. `**/<200b>*`)
ZERO_WIDTH_SPACE = '\u200b'

# Tags lua-ls would try to interpret if a doc line started with them (after any indent).
_ESCAPED_TAGS = ('@sample',)

_PARAGRAPH_SPLIT = re.compile(r'\n?\n')


def sanitize_documentation(documentation: str) -> str:
    return documentation.replace(ZERO_WIDTH_SPACE, '')


def _escape_tag(line: str) -> str:
    stripped = line.lstrip()
    for tag in _ESCAPED_TAGS:
        if stripped.startswith(tag):
            indent = len(line) - len(stripped)
            return line[:indent] + '\\' + stripped
    return line


def format_documentation(documentation: str, prefix: str = COMMENT_PREFIX) -> str:
    """
    Reformat a (possibly multi-line) documentation string as a block of comment lines.
    Every line gets `prefix`, empty lines included, so paragraphs stay visible.
    """
    text = sanitize_documentation(documentation)
    return '\n'.join(prefix + _escape_tag(line) for line in text.split('\n'))


def documentation_lines(documentation: Optional[str]) -> List[str]:
    """
    Non-empty lines of a documentation string, split on line and paragraph breaks.
    Used where a compact comment is wanted (the method table).
    """
    if not documentation:
        return []
    text = sanitize_documentation(documentation)
    return [_escape_tag(part) for part in _PARAGRAPH_SPLIT.split(text) if part]
