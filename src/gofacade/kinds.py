"""Kind taxonomy for declared entities and for the shape of their types."""
from enum import IntFlag


class KindSet(IntFlag):
    """Base for kind enumerations supporting "any-of" matching."""

    def in_set(self, mask):
        """Report whether this kind is one of the kinds in mask.

        A zero mask matches anything.
        """
        return mask == 0 or bool(self & mask)

    def label(self):
        return self.name.lower()


class DeclKind(KindSet):
    """For the kind of a declared object."""

    BAD = 1 << 0  # for errors, or an identifier without object
    LABEL = 1 << 1
    BUILTIN = 1 << 2
    NIL = 1 << 3
    VARIABLE = 1 << 4  # variables, fields, params and results
    CONSTANT = 1 << 5
    FUNCTION = 1 << 6  # functions and methods
    TYPE = 1 << 7
    PACKAGE = 1 << 8

    ANY = (1 << 9) - 1


class TypeKind(KindSet):
    """For the shape of a type, after following a named type once."""

    SUSPENSE = 1 << 0  # unresolved or invalid

    BOOL = 1 << 1
    INT = 1 << 2
    INT8 = 1 << 3
    INT16 = 1 << 4
    INT32 = 1 << 5
    INT64 = 1 << 6
    UINT = 1 << 7
    UINT8 = 1 << 8
    UINT16 = 1 << 9
    UINT32 = 1 << 10
    UINT64 = 1 << 11
    UINTPTR = 1 << 12
    FLOAT32 = 1 << 13
    FLOAT64 = 1 << 14
    COMPLEX64 = 1 << 15
    COMPLEX128 = 1 << 16
    STRING = 1 << 17
    UNSAFE_POINTER = 1 << 18

    ARRAY = 1 << 19
    SLICE = 1 << 20
    MAP = 1 << 21
    CHAN = 1 << 22
    INTERFACE = 1 << 23
    STRUCT = 1 << 24
    FUNC = 1 << 25
    PTR = 1 << 26

    BASIC = ((1 << 19) - 1) & ~1
    ANY = (1 << 27) - 1


# Inbuilt type names and their kinds ("byte" and "rune" are aliases)
BASIC_KINDS = {
    "bool": TypeKind.BOOL,
    "int": TypeKind.INT,
    "int8": TypeKind.INT8,
    "int16": TypeKind.INT16,
    "int32": TypeKind.INT32,
    "rune": TypeKind.INT32,
    "int64": TypeKind.INT64,
    "uint": TypeKind.UINT,
    "uint8": TypeKind.UINT8,
    "byte": TypeKind.UINT8,
    "uint16": TypeKind.UINT16,
    "uint32": TypeKind.UINT32,
    "uint64": TypeKind.UINT64,
    "uintptr": TypeKind.UINTPTR,
    "float32": TypeKind.FLOAT32,
    "float64": TypeKind.FLOAT64,
    "complex64": TypeKind.COMPLEX64,
    "complex128": TypeKind.COMPLEX128,
    "string": TypeKind.STRING,
    "unsafe.Pointer": TypeKind.UNSAFE_POINTER,
}


def basic_kind(name):
    """Return the kind of an inbuilt type name and whether it was found."""
    kind = BASIC_KINDS.get(name)
    if kind is None:
        return TypeKind.SUSPENSE, False
    return kind, True


def get_decl_kind(obj):
    """Classify a semantic object; None is classified as BAD."""
    if obj is None:
        return DeclKind.BAD
    return obj.decl_kind


def get_type_kind(typ):
    """Classify the shape of a type.

    Named types are followed to their underlying type; pointers are reported
    as PTR without looking at what they point to.
    """
    if typ is None:
        return TypeKind.SUSPENSE
    underlying = typ.underlying
    if underlying is None:
        return TypeKind.SUSPENSE
    return underlying.type_kind


def parse_kinds(enum_cls, names):
    """OR together the kinds named in names (case-insensitive).

    Raises:
        ValueError: For an unknown kind name

    """
    mask = enum_cls(0)
    for name in names:
        try:
            mask |= enum_cls[name.upper().replace("-", "_")]
        except KeyError:
            raise ValueError(
                'unknown {} "{}"'.format(enum_cls.__name__, name)
            ) from None
    return mask
