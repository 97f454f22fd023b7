"""
LuaCATS (lua-language-server) annotation generator for the LSP Protocol.
Outputs @class/@alias declarations for every structure, enumeration and type alias,
followed by the classes synthesized for anonymous structure literals.
"""
from typing import List, Optional

from lsp_model import Protocol, Structure, Enumeration, TypeAlias, OrType
from generators.doc_formatter import format_documentation
from generators.generator_utils import LSP_NAMESPACE, lsp_name, lua_enum_literal
from generators.type_lowering import TypeLowerer, AnonymousClassRegistry, field_lines

GENERATOR_SCRIPT = 'gen_lsp.py'

# Base names that are not SIMPLE_TYPES but still need a definition.
PRIMITIVE_ALIASES = [
    '---@alias lsp.null nil',
    '---@alias uinteger integer',
    '---@alias decimal number',
    '---@alias lsp.DocumentUri string',
    '---@alias lsp.URI string',
]


def header_lines(version: str) -> List[str]:
    return [
        '--[[',
        f'THIS FILE IS GENERATED by {GENERATOR_SCRIPT}',
        'DO NOT EDIT MANUALLY',
        '',
        f'Based on LSP protocol {version}',
        '',
        'Regenerate:',
        f'python {GENERATOR_SCRIPT} gen --version {version}',
        '--]]',
        '',
        '---@meta',
        "error('Cannot require a meta file')",
        '',
    ] + PRIMITIVE_ALIASES + ['']


def emit_structure(structure: Structure, lowerer: TypeLowerer) -> List[str]:
    lines = []
    if structure.documentation:
        lines.append(format_documentation(structure.documentation))
    class_line = f"---@class {lsp_name(structure.name, lowerer.namespace)}"
    parents = [lowerer.lower(t) for t in structure.extends + structure.mixins]
    if parents:
        class_line += ': ' + ', '.join(parents)
    lines.append(class_line)
    for prop in structure.properties:
        lines.extend(field_lines(prop, lowerer.lower(prop.type, prop.name)))
    lines.append('')
    return lines


def emit_enumeration(enum: Enumeration, namespace: str = LSP_NAMESPACE) -> List[str]:
    # Only the value matters to lua-ls; the member name is kept as a trailing comment.
    lines = []
    if enum.documentation:
        lines.append(format_documentation(enum.documentation))
    lines.append(f"---@alias {lsp_name(enum.name, namespace)}")
    for value in enum.values:
        lines.append(f"---| {lua_enum_literal(value.value)} # {value.name}")
    lines.append('')
    return lines


def emit_type_alias(alias: TypeAlias, lowerer: TypeLowerer) -> List[str]:
    lines = []
    if alias.documentation:
        lines.append(format_documentation(alias.documentation))
    if isinstance(alias.type, OrType):
        # Lower each alternative on its own so a top-level union stays flat.
        lua_type = '|'.join(lowerer.lower(item, alias.name) for item in alias.type.items)
    else:
        lua_type = lowerer.lower(alias.type, alias.name)
    lines.append(f"---@alias {lsp_name(alias.name, lowerer.namespace)} {lua_type}")
    lines.append('')
    return lines


def generate_lua_annotations(protocol: Protocol, version: str, lowerer: Optional[TypeLowerer] = None) -> str:
    """
    Render the whole _meta/protocol.lua file.
    Declarations keep the order of the metaModel lists; anonymous classes come last,
    in the order they were allocated.
    """
    if lowerer is None:
        lowerer = TypeLowerer(AnonymousClassRegistry())
    lines = header_lines(version)
    for structure in protocol.structures:
        lines.extend(emit_structure(structure, lowerer))
    for enum in protocol.enumerations:
        lines.extend(emit_enumeration(enum, lowerer.namespace))
    for alias in protocol.type_aliases:
        lines.extend(emit_type_alias(alias, lowerer))
    lines.extend(lowerer.registry.render())
    return '\n'.join(lines) + '\n'


def write_lua_annotations_file(protocol: Protocol, version: str, out_path: str, verbose: bool = False) -> str:
    code = generate_lua_annotations(protocol, version, TypeLowerer(verbose=verbose))
    with open(out_path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(code)
    print(f"Written to: {out_path}")
    return code
