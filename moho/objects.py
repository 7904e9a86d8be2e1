from enum import IntEnum

from dataclasses import dataclass, replace
from dataslots import with_slots
from typing import Any, Iterator, List, Optional, Tuple, Union


class ValueKind(IntEnum):
    default = 0
    nullptr = 1
    char = 2
    bool = 3
    float = 4
    string = 5
    integer = 6


@with_slots
@dataclass(frozen=True)
class Value:
    kind: ValueKind
    data: Any = None

    @staticmethod
    def char(byte):
        if not 0 <= byte <= 0xFF:
            raise ValueError('char value %d is out of range for a byte' % byte)
        return Value(ValueKind.char, byte)

    @staticmethod
    def boolean(flag):
        return Value(ValueKind.bool, bool(flag))

    @staticmethod
    def float(number):
        return Value(ValueKind.float, float(number))

    @staticmethod
    def string(text):
        return Value(ValueKind.string, text)

    @staticmethod
    def integer(number):
        return Value(ValueKind.integer, int(number))

    def is_default(self):
        return self.kind == ValueKind.default

    def is_nullptr(self):
        return self.kind == ValueKind.nullptr

    def __str__(self):
        if self.kind == ValueKind.default:
            return ''
        if self.kind == ValueKind.nullptr:
            return 'nullptr'
        if self.kind == ValueKind.bool:
            return 'true' if self.data else 'false'
        if self.kind == ValueKind.char:
            return "'%d'" % self.data
        if self.kind == ValueKind.string:
            return '"%s"' % self.data
        # repr() gives the shortest text that reads back to the same double.
        return repr(self.data)


DEFAULT = Value(ValueKind.default)
NULLPTR = Value(ValueKind.nullptr)


class Primitive(IntEnum):
    void = 0
    char = 1
    bool = 2
    float = 3
    string = 4
    integer = 5


PRIMITIVE_SPELLINGS = {
    Primitive.void: 'void',
    Primitive.char: 'char',
    Primitive.bool: 'bool',
    Primitive.float: 'float',
    Primitive.string: 'string',
    Primitive.integer: 'int',
}


class Type(object):
    """Closed type lattice: a primitive core plus composite wrappers and class references."""

    __slots__ = ()

    @property
    def kind(self):
        raise NotImplementedError

    def is_primitive(self):
        return False

    def is_composite(self):
        return False

    def is_class(self):
        return False

    def is_pointer(self):
        return False

    def is_reference(self):
        return False

    def is_array(self):
        return False

    def is_matrix(self):
        return False

    def inner(self):
        raise TypeError('%s has no inner type' % self)

    def innermost(self):
        typ = self
        while typ.is_composite():
            typ = typ.inner()
        return typ


class CompositeType(Type):
    __slots__ = ()

    def is_composite(self):
        return True

    def inner(self):
        return self.wrapped


@with_slots
@dataclass(frozen=True)
class PrimitiveType(Type):
    primitive: Primitive

    @property
    def kind(self):
        return self.primitive.name

    def is_primitive(self):
        return True

    def __str__(self):
        return PRIMITIVE_SPELLINGS[self.primitive]


@with_slots
@dataclass(frozen=True)
class ClassType(Type):
    name: str

    @property
    def kind(self):
        return 'class'

    def is_class(self):
        return True

    def __str__(self):
        return self.name


@with_slots
@dataclass(frozen=True)
class ArrayType(CompositeType):
    wrapped: Type

    @property
    def kind(self):
        return 'array'

    def is_array(self):
        return True

    def __str__(self):
        return '%s[]' % self.wrapped


@with_slots
@dataclass(frozen=True)
class MatrixType(CompositeType):
    wrapped: Type

    @property
    def kind(self):
        return 'matrix'

    def is_matrix(self):
        return True

    def __str__(self):
        return 'Matrix<%s>' % self.wrapped


@with_slots
@dataclass(frozen=True)
class PointerType(CompositeType):
    wrapped: Type
    depth: int = 1

    def __post_init__(self):
        if self.depth not in (1, 2):
            raise ValueError('pointer depth must be 1 or 2, got %r' % self.depth)

    @property
    def kind(self):
        return 'pointer'

    def is_pointer(self):
        return True

    def __str__(self):
        return '%s%s' % (self.wrapped, '*' * self.depth)


@with_slots
@dataclass(frozen=True)
class ReferenceType(CompositeType):
    wrapped: Type

    @property
    def kind(self):
        return 'ref'

    def is_reference(self):
        return True

    def __str__(self):
        return '%s&' % self.wrapped


VOID = PrimitiveType(Primitive.void)
CHAR = PrimitiveType(Primitive.char)
BOOL = PrimitiveType(Primitive.bool)
FLOAT = PrimitiveType(Primitive.float)
STRING = PrimitiveType(Primitive.string)
INTEGER = PrimitiveType(Primitive.integer)

TYPE_KEYWORDS = {
    'bool': BOOL,
    'char': CHAR,
    'float': FLOAT,
    'double': FLOAT,
    'int': INTEGER,
    'long': INTEGER,
    'string': STRING,
}


def type_from_name(identifier):  # type: (str) -> Type
    try:
        return TYPE_KEYWORDS[identifier]
    except KeyError:
        return ClassType(identifier)


@with_slots
@dataclass(frozen=True)
class Property:
    name: str
    value: Optional[Value] = None
    meta: bool = False

    def is_flag(self):
        return self.value is None

    def __str__(self):
        text = 'meta %s' % self.name if self.meta else self.name
        if self.value is not None:
            text = '%s=%s' % (text, self.value)
        return text


def find_property(properties, name, meta=None):
    """Return the last property called ``name``, so the innermost scope wins."""
    for prop in reversed(properties):
        if prop.name == name and (meta is None or prop.meta == meta):
            return prop
    return None


def has_property(properties, name, meta=None):
    return find_property(properties, name, meta) is not None


@with_slots
@dataclass(frozen=True)
class Argument:
    name: str
    typ: str
    value: Optional[Value] = None
    properties: Tuple[Property, ...] = ()


@with_slots
@dataclass(frozen=True)
class Field:
    name: str
    typ: Type
    value: Optional[Value] = None
    properties: Tuple[Property, ...] = ()
    is_static: bool = False

    def propagate(self, properties):
        return replace(self, properties=tuple(properties) + self.properties)


@with_slots
@dataclass(frozen=True)
class Method:
    name: str
    returns: str
    arguments: Tuple[Argument, ...] = ()
    properties: Tuple[Property, ...] = ()
    is_static: bool = False

    def propagate(self, properties):
        return replace(self, properties=tuple(properties) + self.properties)


@with_slots
@dataclass(frozen=True)
class Block:
    properties: Tuple[Property, ...] = ()
    inner: Tuple['Declaration', ...] = ()

    def normalize(self):
        """Flatten nested blocks into a single block of fields and methods.

        Every leaf receives the properties of its enclosing blocks, outermost
        first, followed by its own. A block's direct leaves come before the
        leaves of its nested blocks; nested blocks are visited depth-first in
        declaration order. Uses an explicit stack so deep nesting cannot
        exhaust the interpreter's recursion limit.
        """
        leaves = []
        pending = [(self, ())]

        while pending:
            block, inherited = pending.pop()
            scope = inherited + block.properties
            nested = []

            for decl in block.inner:
                if isinstance(decl, Block):
                    nested.append((decl, scope))
                else:
                    leaves.append(decl.propagate(scope))

            pending.extend(reversed(nested))

        return Block((), tuple(leaves))

    def fields(self):  # type: () -> List[Field]
        return [decl for decl in self.normalize().inner if isinstance(decl, Field)]

    def methods(self):  # type: () -> List[Method]
        return [decl for decl in self.normalize().inner if isinstance(decl, Method)]


Declaration = Union[Block, Field, Method]


@with_slots
@dataclass(frozen=True)
class Class:
    name: str
    inherit: Tuple[str, ...] = ()
    inner: Block = Block()
    properties: Tuple[Property, ...] = ()

    @property
    def primary_base(self):
        return self.inherit[0] if self.inherit else None

    def fields(self):
        return self.inner.fields()

    def methods(self):
        return self.inner.methods()

    def __str__(self):
        if self.inherit:
            return 'class %s : %s' % (self.name, ', '.join(self.inherit))
        return 'class %s' % self.name


@with_slots
@dataclass(frozen=True)
class TranslationUnit:
    classes: Tuple[Class, ...] = ()

    def __iter__(self):  # type: () -> Iterator[Class]
        return iter(self.classes)

    def __len__(self):
        return len(self.classes)

    def __getitem__(self, item):
        return self.classes[item]

    def find(self, name):
        for dclass in self.classes:
            if dclass.name == name:
                return dclass
        return None
