"""
Method and capability tables for runtime/lua/vim/lsp/protocol.lua.
Both tables cover requests and notifications together and are sorted by Lua name,
so regenerating from the same metaModel gives the same text.
"""
from typing import List, Sequence

from lsp_model import Protocol, Notification
from generators.doc_formatter import documentation_lines
from generators.generator_utils import to_lua_name, lua_single_quoted

GENERATED_MARKER = '-- Generated by gen_lsp.py, keep at end of file.'
MESSAGE_DIRECTIONS = ('clientToServer', 'serverToClient')
METHOD_ALIAS = 'vim.lsp.protocol.Method'
INDENT = ' ' * 2


def sorted_by_lua_name(messages: Sequence[Notification]) -> List[Notification]:
    return sorted(messages, key=lambda m: to_lua_name(m.method))


def all_messages(protocol: Protocol) -> List[Notification]:
    """Notifications and requests merged and sorted. Lua names must not collide."""
    merged = sorted_by_lua_name(list(protocol.notifications) + list(protocol.requests))
    seen = {}
    for msg in merged:
        lua_name = to_lua_name(msg.method)
        if lua_name in seen:
            raise ValueError(f"Methods '{seen[lua_name]}' and '{msg.method}' both map to Lua name '{lua_name}'")
        seen[lua_name] = msg.method
    return merged


def _direction_title(direction: str) -> str:
    return direction[:1].upper() + direction[1:]


def method_alias_lines(protocol: Protocol) -> List[str]:
    lines = []
    requests = sorted_by_lua_name(protocol.requests)
    notifications = sorted_by_lua_name(protocol.notifications)
    for direction in MESSAGE_DIRECTIONS:
        alias = f"{METHOD_ALIAS}.{_direction_title(direction)}"
        for title, messages in (('Request', requests), ('Notification', notifications)):
            lines.append(f"--- @alias {alias}.{title}")
            for msg in messages:
                if msg.message_direction == direction:
                    lines.append(f"--- | '{msg.method}',")
            lines.append('')
        lines.extend([
            f"--- @alias {alias}",
            f"--- | {alias}.Request",
            f"--- | {alias}.Notification",
            '',
        ])
    lines.extend([f"--- @alias {METHOD_ALIAS}"]
                 + [f"--- | {METHOD_ALIAS}.{_direction_title(d)}" for d in MESSAGE_DIRECTIONS]
                 + [''])
    return lines


def methods_enum_lines(messages: Sequence[Notification]) -> List[str]:
    lines = [
        GENERATED_MARKER,
        '--- @enum vim.lsp.protocol.Methods',
        '--- @see https://microsoft.github.io/language-server-protocol/specification/#metaModel',
        '--- LSP method names.',
        'protocol.Methods = {',
    ]
    for msg in messages:
        if not msg.method:
            continue
        for doc_line in documentation_lines(msg.documentation):
            lines.append(f"{INDENT}--- {doc_line}")
        lines.append(f"{INDENT}{to_lua_name(msg.method)} = {lua_single_quoted(msg.method)},")
    lines.append('}')
    return lines


def capability_lines(messages: Sequence[Notification]) -> List[str]:
    lines = [
        '',
        '-- stylua: ignore start',
        GENERATED_MARKER,
        '--- Maps method names to the required server capability',
        'protocol._request_name_to_capability = {',
    ]
    for msg in messages:
        if msg.server_capability:
            path = ', '.join(lua_single_quoted(segment) for segment in msg.server_capability.split('.'))
            lines.append(f"{INDENT}[{lua_single_quoted(msg.method)}] = {{ {path} }},")
    lines.append('}')
    lines.append('-- stylua: ignore end')
    return lines


def generate_protocol_block(protocol: Protocol, gen_methods: bool, gen_capabilities: bool) -> str:
    """
    Text that replaces everything from the generated marker to the end of protocol.lua.
    Returns '' when neither table is requested.
    """
    if not gen_methods and not gen_capabilities:
        return ''
    messages = all_messages(protocol)
    lines = [GENERATED_MARKER]
    if gen_methods:
        lines.extend(method_alias_lines(protocol))
        lines.extend(methods_enum_lines(messages))
    if gen_capabilities:
        lines.extend(capability_lines(messages))
    lines.extend(['', 'return protocol'])
    return '\n'.join(lines) + '\n'
