"""Read-only views of the AST handed to template code.

Templates only ever see these mappings, never the AST objects themselves,
so the parser can change its internals without breaking template scripts.
"""

from types import MappingProxyType

from moho.objects import DEFAULT, Class, Field, Method


def value_view(value):
    if value is None:
        value = DEFAULT

    return MappingProxyType({
        'kind': value.kind.name,
        'data': value.data,
        'text': str(value),
    })


def type_view(typ):
    inner = type_view(typ.inner()) if typ.is_composite() else None

    return MappingProxyType({
        'kind': typ.kind,
        'text': str(typ),
        'is_primitive': typ.is_primitive(),
        'name': typ.name if typ.is_class() else None,
        'depth': getattr(typ, 'depth', 0),
        'inner': inner,
    })


def property_view(prop):
    return MappingProxyType({
        'name': prop.name,
        'meta': prop.meta,
        'value': value_view(prop.value) if prop.value is not None else None,
    })


def properties_view(properties):
    return tuple(property_view(prop) for prop in properties)


def argument_view(argument):
    return MappingProxyType({
        'name': argument.name,
        'type': argument.typ,
        'value': value_view(argument.value),
        'properties': properties_view(argument.properties),
    })


def field_view(field):  # type: (Field) -> MappingProxyType
    return MappingProxyType({
        'name': field.name,
        'type': type_view(field.typ),
        'value': value_view(field.value),
        'has_value': field.value is not None,
        'static': field.is_static,
        'properties': properties_view(field.properties),
    })


def method_view(method):  # type: (Method) -> MappingProxyType
    return MappingProxyType({
        'name': method.name,
        'returns': method.returns,
        'static': method.is_static,
        'arguments': tuple(argument_view(arg) for arg in method.arguments),
        'properties': properties_view(method.properties),
    })


def class_view(dclass):  # type: (Class) -> MappingProxyType
    return MappingProxyType({
        'name': dclass.name,
        'inherit': tuple(dclass.inherit),
        'primary_base': dclass.primary_base,
        'properties': properties_view(dclass.properties),
        'fields': tuple(field_view(field) for field in dclass.fields()),
        'methods': tuple(method_view(method) for method in dclass.methods()),
    })
