"""Objects and types produced by the checker.

Types are compared by identity: the checker makes one `Named` per type
declaration and one `Basic` per inbuilt type, while composite types are made
afresh for every type expression.
"""
from .go_ast import ChanDir
from .kinds import BASIC_KINDS, DeclKind, TypeKind
from .positions import NO_POS

# =============================================================================
# TYPES
# =============================================================================


class GoBaseType:
    """The base class to inherit types from."""

    type_kind = TypeKind.SUSPENSE

    @property
    def underlying(self):
        return self

    def __repr__(self):
        return "<{} {}>".format(type(self).__name__, self)


class Basic(GoBaseType):
    """For inbuilt types, untyped constant types and the invalid type."""

    def __init__(self, kind, name, untyped=False):
        self.kind = kind
        self.name = name
        self.untyped = untyped

    @property
    def type_kind(self):
        return self.kind

    def __str__(self):
        return self.name


class Named(GoBaseType):
    """For types declared with a name.

    The underlying type is set by the checker once the declaration has been
    resolved; until then it is None.
    """

    type_kind = TypeKind.SUSPENSE

    def __init__(self, obj, underlying=None):
        self.obj = obj
        self._underlying = underlying
        self.methods = []  # `Func`s declared with this type as receiver

    @property
    def underlying(self):
        return self._underlying

    def set_underlying(self, typ):
        # Follow declarations like "type A B" to the type literal
        if isinstance(typ, Named):
            typ = typ.underlying
        self._underlying = typ

    def add_method(self, method):
        self.methods.append(method)

    def __str__(self):
        if self.obj.pkg is None:
            return self.obj.name
        return "{}.{}".format(self.obj.pkg.name, self.obj.name)


class Pointer(GoBaseType):
    """For pointer types."""

    type_kind = TypeKind.PTR

    def __init__(self, elem):
        self.elem = elem

    def __str__(self):
        return "*{}".format(self.elem)


class Array(GoBaseType):
    """For array types; length is -1 if it could not be evaluated."""

    type_kind = TypeKind.ARRAY

    def __init__(self, elem, length):
        self.elem = elem
        self.length = length

    def __str__(self):
        return "[{}]{}".format(self.length, self.elem)


class Slice(GoBaseType):
    """For slice types."""

    type_kind = TypeKind.SLICE

    def __init__(self, elem):
        self.elem = elem

    def __str__(self):
        return "[]{}".format(self.elem)


class Map(GoBaseType):
    """For map types."""

    type_kind = TypeKind.MAP

    def __init__(self, key, elem):
        self.key = key
        self.elem = elem

    def __str__(self):
        return "map[{}]{}".format(self.key, self.elem)


class Chan(GoBaseType):
    """For channel types."""

    type_kind = TypeKind.CHAN

    def __init__(self, direction, elem):
        self.dir = direction
        self.elem = elem

    def __str__(self):
        if self.dir == ChanDir.SEND:
            return "chan<- {}".format(self.elem)
        if self.dir == ChanDir.RECV:
            return "<-chan {}".format(self.elem)
        return "chan {}".format(self.elem)


class Struct(GoBaseType):
    """For struct types; fields and tags are parallel lists."""

    type_kind = TypeKind.STRUCT

    def __init__(self, fields, tags):
        self.fields = fields
        self.tags = tags

    def __str__(self):
        parts = []
        for field in self.fields:
            if field.embedded:
                parts.append(str(field.type))
            else:
                parts.append("{} {}".format(field.name, field.type))
        return "struct{" + "; ".join(parts) + "}"


class Tuple(GoBaseType):
    """For parameter and result lists."""

    def __init__(self, variables=None):
        self.vars = variables if variables is not None else []

    def __len__(self):
        return len(self.vars)

    def __str__(self):
        return "(" + ", ".join(str(var.type) for var in self.vars) + ")"


class Signature(GoBaseType):
    """For function and method types."""

    type_kind = TypeKind.FUNC

    def __init__(self, params, results, recv=None, variadic=False):
        self.recv = recv
        self.params = params
        self.results = results
        self.variadic = variadic

    def __str__(self):
        params = []
        for i, var in enumerate(self.params.vars):
            typ = str(var.type)
            if self.variadic and i == len(self.params) - 1:
                typ = "..." + typ[2:]  # Variadic params are slices
            params.append(typ)
        output = "func(" + ", ".join(params) + ")"
        if len(self.results) == 1:
            output += " {}".format(self.results.vars[0].type)
        elif len(self.results) > 1:
            output += " {}".format(self.results)
        return output


class Interface(GoBaseType):
    """For interface types."""

    type_kind = TypeKind.INTERFACE

    def __init__(self, methods, embeddeds=None):
        self.methods = methods
        self.embeddeds = embeddeds if embeddeds is not None else []

    def __str__(self):
        parts = [str(embedded) for embedded in self.embeddeds]
        for method in self.methods:
            parts.append(method.name + str(method.type)[4:])
        return "interface{" + "; ".join(parts) + "}"


# =============================================================================
# OBJECTS
# =============================================================================


class GoObject:
    """The base class to inherit declared objects from."""

    decl_kind = DeclKind.BAD

    def __init__(self, name, dtype=None, pkg=None, pos=NO_POS):
        self.name = name
        self.type = dtype
        self.pkg = pkg
        self.pos = pos

    def exported(self):
        return self.name[:1].isupper()

    def __repr__(self):
        return "<{} {}>".format(type(self).__name__, self.name)


class Var(GoObject):
    """For variables, struct fields, parameters and results."""

    decl_kind = DeclKind.VARIABLE

    def __init__(
        self, name, dtype=None, pkg=None, pos=NO_POS, is_field=False,
        embedded=False,
    ):
        super().__init__(name, dtype, pkg, pos)
        self.is_field = is_field
        self.embedded = embedded


class Const(GoObject):
    """For constants; value is an int when it could be evaluated."""

    decl_kind = DeclKind.CONSTANT

    def __init__(self, name, dtype=None, pkg=None, pos=NO_POS, value=None):
        super().__init__(name, dtype, pkg, pos)
        self.value = value


class TypeName(GoObject):
    """For declared types and aliases."""

    decl_kind = DeclKind.TYPE

    def __init__(self, name, dtype=None, pkg=None, pos=NO_POS, is_alias=False):
        super().__init__(name, dtype, pkg, pos)
        self.is_alias = is_alias


class Func(GoObject):
    """For functions, methods and interface methods."""

    decl_kind = DeclKind.FUNCTION

    def recv(self):
        if self.type is None:
            return None
        return self.type.recv


class PkgName(GoObject):
    """For the name of an imported package."""

    decl_kind = DeclKind.PACKAGE

    def __init__(self, name, imported, pkg=None, pos=NO_POS):
        super().__init__(name, None, pkg, pos)
        self.imported = imported


class Label(GoObject):
    """For statement labels."""

    decl_kind = DeclKind.LABEL


class Builtin(GoObject):
    """For inbuilt functions like "len"."""

    decl_kind = DeclKind.BUILTIN


class Nil(GoObject):
    """For the predeclared "nil"."""

    decl_kind = DeclKind.NIL


# =============================================================================
# PACKAGES AND SCOPE
# =============================================================================


class Scope:
    """For a mapping of names to objects, with a parent scope."""

    def __init__(self, parent=None):
        self.parent = parent
        self.elems = {}

    def lookup(self, name):
        """Return the object with the name in this scope only, or None."""
        return self.elems.get(name)

    def lookup_parent(self, name):
        """Return the object with the name in this or an enclosing scope."""
        scope = self
        while scope is not None:
            obj = scope.elems.get(name)
            if obj is not None:
                return obj
            scope = scope.parent
        return None

    def insert(self, obj):
        """Insert obj unless its name is taken; return the previous object."""
        previous = self.elems.get(obj.name)
        if previous is not None:
            return previous
        self.elems[obj.name] = obj
        return None

    def names(self):
        return sorted(self.elems)


class Package:
    """For a checked package.

    fake is true for packages which could not be imported; qualified names
    in them resolve to placeholder types.
    """

    def __init__(self, path, name, fake=False):
        self.path = path
        self.name = name
        self.scope = Scope(universe)
        self.imports = []
        self.fake = fake

    def __repr__(self):
        return "<Package {}>".format(self.path)


# =============================================================================
# UNIVERSE
# =============================================================================

invalid = Basic(TypeKind.SUSPENSE, "invalid type")

Typ = {name: Basic(kind, name) for name, kind in BASIC_KINDS.items()}
del Typ["unsafe.Pointer"]

untyped = {
    "INT": Basic(TypeKind.INT, "untyped int", True),
    "FLOAT": Basic(TypeKind.FLOAT64, "untyped float", True),
    "IMAG": Basic(TypeKind.COMPLEX128, "untyped complex", True),
    "RUNE": Basic(TypeKind.INT32, "untyped rune", True),
    "STRING": Basic(TypeKind.STRING, "untyped string", True),
    "BOOL": Basic(TypeKind.BOOL, "untyped bool", True),
}

# Types given to untyped constants when they become variables
default_types = {
    "untyped int": Typ["int"],
    "untyped float": Typ["float64"],
    "untyped complex": Typ["complex128"],
    "untyped rune": Typ["rune"],
    "untyped string": Typ["string"],
    "untyped bool": Typ["bool"],
}

builtin_funcs = [
    "append",
    "cap",
    "clear",
    "close",
    "complex",
    "copy",
    "delete",
    "imag",
    "len",
    "make",
    "max",
    "min",
    "new",
    "panic",
    "print",
    "println",
    "real",
    "recover",
]


def _make_universe():
    scope = Scope()
    for name, typ in Typ.items():
        scope.insert(TypeName(name, typ))

    error_obj = TypeName("error")
    error_type = Named(error_obj)
    error_obj.type = error_type
    error_method = Func(
        "Error",
        Signature(
            Tuple(), Tuple([Var("", Typ["string"])]), Var("", error_type)
        ),
    )
    error_type.set_underlying(Interface([error_method]))
    scope.insert(error_obj)
    scope.insert(TypeName("any", Interface([]), is_alias=True))

    for name in builtin_funcs:
        scope.insert(Builtin(name, invalid))
    scope.insert(Const("true", untyped["BOOL"], value=True))
    scope.insert(Const("false", untyped["BOOL"], value=False))
    scope.insert(Const("iota", untyped["INT"], value=0))
    scope.insert(Nil("nil", invalid))
    return scope


universe = _make_universe()

unsafe = Package("unsafe", "unsafe")
unsafe.scope.insert(
    TypeName(
        "Pointer",
        Basic(TypeKind.UNSAFE_POINTER, "unsafe.Pointer"),
        unsafe,
    )
)
