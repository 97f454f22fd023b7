"""
Shared utilities for the Lua annotation generators.
Handles primitive type names, method name mangling and Lua literal quoting.
"""
import re
from typing import Union

# --- Type Mapping ---
# metaModel base/reference names that lua-ls already knows (or that the generated
# file aliases itself), emitted verbatim instead of under the lsp. namespace.
SIMPLE_TYPES = (
    'string',
    'boolean',
    'integer',
    'uinteger',
    'decimal',
)

LSP_NAMESPACE = 'lsp'

_NON_IDENTIFIER = re.compile(r'[^A-Za-z0-9_]')


# --- Name Resolution ---
def to_lua_name(method: str) -> str:
    """
    Lua identifier for a fully-qualified LSP method name.
    '$/' methods live in a reserved namespace, the '$' becomes 'dollar'.
    """
    name = re.sub(r'^\$', 'dollar', method).replace('/', '_')
    name = _NON_IDENTIFIER.sub('_', name)
    if name[:1].isdigit():
        name = '_' + name
    return name


def lsp_name(name: str, namespace: str = LSP_NAMESPACE) -> str:
    return f"{namespace}.{name}" if namespace else name


# --- Literals ---
def lua_single_quoted(value: str) -> str:
    return f"'{value}'"


def lua_enum_literal(value: Union[str, int, float]) -> str:
    """Enumeration member value as it appears in an @alias alternative."""
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
