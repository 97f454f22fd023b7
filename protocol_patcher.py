"""
protocol_patcher.py
Splices a generated block into the hand-maintained protocol.lua. Works on strings only;
reading and writing the file is the caller's job.
"""
import os
import re
from typing import Optional

# Any line starting with this begins the generated region.
MARKER_PREFIX = '-- Generated by'

# '^' under re.M only matches after '\n', so form feeds, U+2028 etc. never start a line here.
_MARKER_LINE = re.compile('^' + re.escape(MARKER_PREFIX), re.M)


def find_marker_offset(content: str) -> Optional[int]:
    match = _MARKER_LINE.search(content)
    return match.start() if match else None


def patch_protocol_content(old_content: str, block: str) -> str:
    """
    Replace everything from the first marker line to end-of-file with `block`.
    Without a marker the block is appended. Text before the marker is kept byte for byte.
    Applying the same block twice gives the same result as applying it once, as long as
    the block itself starts with a marker.
    """
    offset = find_marker_offset(old_content)
    if offset is not None:
        head = old_content[:offset]
    else:
        head = old_content
        if head and not head.endswith('\n'):
            head += '\n'
    return head + block


def patch_protocol_file(path: str, block: str, verbose: bool = False) -> str:
    old_content = ''
    if os.path.exists(path):
        with open(path, 'r', encoding='utf-8', newline='') as f:
            old_content = f.read()
    elif verbose:
        print(f"[DEBUG] patch_protocol_file: '{path}' does not exist, creating it")
    new_content = patch_protocol_content(old_content, block)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write(new_content)
    print(f"Written to: {path}")
    return new_content
