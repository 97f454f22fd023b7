"""
lsp_model.py
In-memory representation of the LSP metaModel.json document. Everything the
generators consume comes from here; the objects are built once per run and never mutated.
"""
from typing import List, Optional, Any, Dict, Union


class TypeExpression:
    """
    Base class for one node of the metaModel type grammar.
    """
    kind = None

    def __repr__(self):
        return f"{type(self).__name__}(kind={self.kind!r})"


class ReferenceType(TypeExpression):
    kind = "reference"

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"ReferenceType(name={self.name!r})"


class BaseType(TypeExpression):
    kind = "base"

    def __init__(self, name: str):
        self.name = name

    def __repr__(self):
        return f"BaseType(name={self.name!r})"


class ArrayType(TypeExpression):
    kind = "array"

    def __init__(self, element: TypeExpression):
        self.element = element


class OrType(TypeExpression):
    kind = "or"

    def __init__(self, items: List[TypeExpression]):
        self.items = items


class MapType(TypeExpression):
    kind = "map"

    def __init__(self, key: TypeExpression, value: TypeExpression):
        self.key = key
        self.value = value


class StringLiteralType(TypeExpression):
    kind = "stringLiteral"

    def __init__(self, value: str):
        self.value = value


class StructureLiteralType(TypeExpression):
    """
    Inline, anonymous structure. Has the same property shape as a named Structure.
    """
    kind = "literal"

    def __init__(self, properties: List['Property'], documentation: Optional[str] = None):
        self.properties = properties
        self.documentation = documentation


class TupleType(TypeExpression):
    kind = "tuple"

    def __init__(self, items: List[TypeExpression]):
        self.items = items


class UnknownType(TypeExpression):
    """
    Any kind the generator does not understand yet (e.g. 'and', 'integerLiteral').
    Keeps the raw JSON so the warning can show what was skipped.
    """
    def __init__(self, kind: Optional[str], raw: Any):
        self.kind = kind
        self.raw = raw

    def __repr__(self):
        return f"UnknownType(kind={self.kind!r})"


class Property:
    def __init__(self, name: str, type: TypeExpression, optional: bool = False, documentation: Optional[str] = None):
        self.name = name
        self.type = type
        self.optional = optional
        self.documentation = documentation


class Structure:
    def __init__(self, name: str, properties: List[Property], extends: Optional[List[TypeExpression]] = None,
                 mixins: Optional[List[TypeExpression]] = None, documentation: Optional[str] = None):
        self.name = name
        self.properties = properties
        self.extends = extends or []
        self.mixins = mixins or []
        self.documentation = documentation


class EnumerationValue:
    def __init__(self, name: str, value: Union[str, int], documentation: Optional[str] = None):
        self.name = name
        self.value = value
        self.documentation = documentation


class Enumeration:
    def __init__(self, name: str, values: List[EnumerationValue], documentation: Optional[str] = None):
        self.name = name
        self.values = values
        self.documentation = documentation


class TypeAlias:
    def __init__(self, name: str, type: TypeExpression, documentation: Optional[str] = None):
        self.name = name
        self.type = type
        self.documentation = documentation


class Notification:
    is_request = False

    def __init__(self, method: str, message_direction: str, documentation: Optional[str] = None,
                 server_capability: Optional[str] = None, params: Optional[TypeExpression] = None):
        self.method = method
        self.message_direction = message_direction
        self.documentation = documentation
        self.server_capability = server_capability
        self.params = params

    def __repr__(self):
        return f"{type(self).__name__}(method={self.method!r}, direction={self.message_direction!r})"


class Request(Notification):
    is_request = True

    def __init__(self, method: str, message_direction: str, documentation: Optional[str] = None,
                 server_capability: Optional[str] = None, params: Optional[TypeExpression] = None,
                 result: Optional[TypeExpression] = None):
        super().__init__(method, message_direction, documentation, server_capability, params)
        self.result = result


class Protocol:
    def __init__(self, requests: List[Request], notifications: List[Notification], structures: List[Structure],
                 enumerations: List[Enumeration], type_aliases: List[TypeAlias], version: Optional[str] = None):
        self.requests = requests
        self.notifications = notifications
        self.structures = structures
        self.enumerations = enumerations
        self.type_aliases = type_aliases
        self.version = version  # metaData.version, if the document carries one


# --- JSON -> model ---

def parse_type(data: Dict[str, Any]) -> TypeExpression:
    """Build a TypeExpression from its JSON form. Unrecognized kinds become UnknownType."""
    kind = data.get('kind') if isinstance(data, dict) else None
    if kind == 'reference':
        return ReferenceType(data['name'])
    if kind == 'base':
        return BaseType(data['name'])
    if kind == 'array':
        return ArrayType(parse_type(data['element']))
    if kind == 'or':
        return OrType([parse_type(item) for item in data.get('items', [])])
    if kind == 'map':
        return MapType(parse_type(data['key']), parse_type(data['value']))
    if kind == 'stringLiteral':
        return StringLiteralType(data['value'])
    if kind == 'literal':
        value = data.get('value', {})
        return StructureLiteralType(
            [parse_property(p) for p in value.get('properties', [])],
            value.get('documentation'),
        )
    if kind == 'tuple':
        return TupleType([parse_type(item) for item in data.get('items', [])])
    return UnknownType(kind, data)


def parse_property(data: Dict[str, Any]) -> Property:
    return Property(
        name=data['name'],
        type=parse_type(data['type']),
        optional=bool(data.get('optional', False)),
        documentation=data.get('documentation'),
    )


def _parse_notification(data: Dict[str, Any]) -> Notification:
    return Notification(
        method=data['method'],
        message_direction=data.get('messageDirection', ''),
        documentation=data.get('documentation'),
        server_capability=data.get('serverCapability'),
        params=parse_type(data['params']) if isinstance(data.get('params'), dict) else None,
    )


def _parse_request(data: Dict[str, Any]) -> Request:
    return Request(
        method=data['method'],
        message_direction=data.get('messageDirection', ''),
        documentation=data.get('documentation'),
        server_capability=data.get('serverCapability'),
        params=parse_type(data['params']) if isinstance(data.get('params'), dict) else None,
        result=parse_type(data['result']) if isinstance(data.get('result'), dict) else None,
    )


def build_protocol(data: Dict[str, Any]) -> Protocol:
    """
    Convert a decoded metaModel.json document into a Protocol.
    List order from the document is kept everywhere.
    """
    structures = []
    for s in data.get('structures', []):
        structures.append(Structure(
            name=s['name'],
            properties=[parse_property(p) for p in s.get('properties', [])],
            extends=[parse_type(t) for t in s.get('extends', [])],
            mixins=[parse_type(t) for t in s.get('mixins', [])],
            documentation=s.get('documentation'),
        ))
    enumerations = []
    for e in data.get('enumerations', []):
        values = [EnumerationValue(v['name'], v['value'], v.get('documentation')) for v in e.get('values', [])]
        enumerations.append(Enumeration(e['name'], values, e.get('documentation')))
    type_aliases = [
        TypeAlias(a['name'], parse_type(a['type']), a.get('documentation'))
        for a in data.get('typeAliases', [])
    ]
    return Protocol(
        requests=[_parse_request(r) for r in data.get('requests', [])],
        notifications=[_parse_notification(n) for n in data.get('notifications', [])],
        structures=structures,
        enumerations=enumerations,
        type_aliases=type_aliases,
        version=(data.get('metaData') or {}).get('version'),
    )
