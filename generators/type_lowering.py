"""
Lowering of metaModel type expressions to LuaCATS type syntax.

Structure literals have no name in the metaModel, so every occurrence gets a synthesized
class (lsp._anonym<N>[.<field path>]) registered in an AnonymousClassRegistry. The
registry is owned by whoever drives the generation and is emitted once, at the end.
"""
import sys
from typing import List, Optional, Sequence

from lsp_model import (
    TypeExpression, ReferenceType, BaseType, ArrayType, OrType, MapType,
    StringLiteralType, StructureLiteralType, TupleType, UnknownType, Property,
)
from generators.generator_utils import SIMPLE_TYPES, LSP_NAMESPACE, lsp_name
from generators.doc_formatter import format_documentation


def field_lines(prop: Property, lua_type: str) -> List[str]:
    """`---@field` entry for a property, preceded by a blank comment line and its docs."""
    lines = ['---']
    if prop.documentation:
        lines.append(format_documentation(prop.documentation))
    lines.append(f"---@field {prop.name}{'?' if prop.optional else ''} {lua_type}")
    return lines


class AnonymousClass:
    def __init__(self, ordinal: int, name: str, documentation: Optional[str] = None):
        self.ordinal = ordinal
        self.name = name
        self.documentation = documentation
        self.lines = []  # filled in after allocation, once the properties are lowered

    def render(self) -> List[str]:
        out = []
        if self.documentation:
            out.append(format_documentation(self.documentation))
        out.append(f"---@class {self.name}")
        out.extend(self.lines)
        return out


class AnonymousClassRegistry:
    """
    Accumulates synthesized classes in allocation order. Ordinals start at 1 and are
    never reused within one registry; structurally identical literals still get
    separate classes.
    """

    def __init__(self, namespace: str = LSP_NAMESPACE):
        self.namespace = namespace
        self.classes: List[AnonymousClass] = []

    def allocate(self, name_path: Optional[str] = None, documentation: Optional[str] = None) -> AnonymousClass:
        ordinal = len(self.classes) + 1
        name = lsp_name(f"_anonym{ordinal}", self.namespace)
        if name_path:
            name = f"{name}.{name_path}"
        anon = AnonymousClass(ordinal, name, documentation)
        self.classes.append(anon)
        return anon

    def render(self) -> List[str]:
        lines = []
        for anon in self.classes:
            if lines:
                lines.append('')
            lines.extend(anon.render())
        return lines

    def __len__(self):
        return len(self.classes)


class TypeLowerer:
    """
    Maps TypeExpression trees to LuaCATS type strings.

    Args:
        registry: where structure literals are registered (a fresh one if omitted)
        simple_types: names emitted as-is instead of namespaced
        namespace: prefix for every other referenced name
    """

    def __init__(self, registry: Optional[AnonymousClassRegistry] = None,
                 simple_types: Sequence[str] = SIMPLE_TYPES, namespace: str = LSP_NAMESPACE,
                 verbose: bool = False):
        self.namespace = namespace
        self.registry = registry if registry is not None else AnonymousClassRegistry(namespace)
        self.simple_types = frozenset(simple_types)
        self.verbose = verbose
        self.warnings: List[str] = []

    def debug_print(self, message: str) -> None:
        if self.verbose:
            print(f"[DEBUG] {message}")

    def log_warning(self, warning: str) -> None:
        self.warnings.append(warning)
        print(f"[WARNING] {warning}", file=sys.stderr)

    def lower(self, type_expr: TypeExpression, prefix: Optional[str] = None) -> str:
        """
        Args:
            type_expr: the type to lower
            prefix: dotted chain of field names leading to this type, used to name
                    classes synthesized for structure literals
        """
        if isinstance(type_expr, (ReferenceType, BaseType)):
            if type_expr.name in self.simple_types:
                return type_expr.name
            return lsp_name(type_expr.name, self.namespace)

        if isinstance(type_expr, ArrayType):
            element = self.lower(type_expr.element, prefix)
            if isinstance(type_expr.element, OrType) and len(type_expr.element.items) > 1:
                element = f"({element})"
            return f"{element}[]"

        if isinstance(type_expr, OrType):
            if not type_expr.items:
                self.log_warning(f"Empty 'or' type (context: {prefix})")
                return ''
            return '|'.join(self.lower(item, prefix) for item in type_expr.items)

        if isinstance(type_expr, StringLiteralType):
            return f'"{type_expr.value}"'

        if isinstance(type_expr, MapType):
            return f"table<{self.lower(type_expr.key, prefix)}, {self.lower(type_expr.value, prefix)}>"

        if isinstance(type_expr, StructureLiteralType):
            return self._lower_structure_literal(type_expr, prefix)

        if isinstance(type_expr, TupleType):
            return '[' + ', '.join(self.lower(item, prefix) for item in type_expr.items) + ']'

        if isinstance(type_expr, UnknownType):
            self.log_warning(f"Unknown type kind '{type_expr.kind}' (context: {prefix}): {type_expr.raw!r}")
            return ''

        raise TypeError(f"Not a type expression: {type_expr!r}")

    def _lower_structure_literal(self, literal: StructureLiteralType, prefix: Optional[str]) -> str:
        # Allocate before recursing so nested literals get higher ordinals than their parent.
        anon = self.registry.allocate(prefix, literal.documentation)
        self.debug_print(f"TypeLowerer: allocated {anon.name}")
        for prop in literal.properties:
            child_prefix = f"{prefix}.{prop.name}" if prefix else prop.name
            anon.lines.extend(field_lines(prop, self.lower(prop.type, child_prefix)))
        return anon.name
