"""Declaration checker for Go packages.

The checker resolves every declaration of a package to an object from
`gotypes` and records, for each declaring identifier, the object it defines.
Function bodies are only looked at for short variable declarations. Errors
are collected and never stop the check.
"""
import logging
from functools import partial

from .errors import GoTypeError
from .go_ast import (
    ChanDir,
    GoArrayType,
    GoAssignStmt,
    GoBasicLit,
    GoChanType,
    GoEllipsis,
    GoFuncDecl,
    GoFuncType,
    GoIdent,
    GoInterfaceType,
    GoMapType,
    GoSelectorExpr,
    GoStarExpr,
    GoStructType,
    base_ident,
    receiver_base,
)
from .gotypes import (
    Array,
    Chan,
    Const,
    Func,
    Interface,
    Map,
    Named,
    Package,
    PkgName,
    Pointer,
    Scope,
    Signature,
    Slice,
    Struct,
    Tuple,
    TypeName,
    Var,
    default_types,
    invalid,
    universe,
    unsafe,
    untyped,
)
from .positions import NO_POS
from .printer import format_node


class Info:
    """For the facts derived by the checker.

    defs maps every declaring identifier to the object it defines, in the
    order the declarations were checked. The package clause and blank
    identifiers map to None.
    """

    def __init__(self):
        self.defs = {}


class NotConstant(Exception):
    """For expressions which are not integer constants."""

    pass


def parse_int(literal):
    """Return the value of a Go integer literal.

    Raises:
        ValueError: If literal is not a valid integer literal

    """
    text = literal.replace("_", "")
    if len(text) > 1 and text[0] == "0" and text[1].isdigit():
        return int(text, 8)  # Old-style octal
    return int(text, 0)


def _go_div(x, y):
    if y == 0:
        raise NotConstant("division by zero")
    quotient = abs(x) // abs(y)
    return quotient if (x < 0) == (y < 0) else -quotient


def _go_mod(x, y):
    return x - _go_div(x, y) * y


def _shift(x, y):
    if y < 0:
        raise NotConstant("negative shift count")
    return x, y


binary_ops = {
    "MULT": (5, lambda x, y: x * y),
    "DIV": (5, _go_div),
    "MODULO": (5, _go_mod),
    "LSHIFT": (5, lambda x, y: x << _shift(x, y)[1]),
    "RSHIFT": (5, lambda x, y: x >> _shift(x, y)[1]),
    "BITAND": (5, lambda x, y: x & y),
    "BITCLR": (5, lambda x, y: x & ~y),
    "PLUS": (4, lambda x, y: x + y),
    "MINUS": (4, lambda x, y: x - y),
    "BITOR": (4, lambda x, y: x | y),
    "BITXOR": (4, lambda x, y: x ^ y),
}


class ConstEvaluator:
    """For evaluating integer constant expressions from raw tokens.

    lookup is called with an identifier and must return its integer value or
    raise `NotConstant`.
    """

    def __init__(self, tokens, lookup):
        self.tokens = tokens
        self.index = 0
        self.lookup = lookup

    def evaluate(self):
        value = self.binary(1)
        if self.index != len(self.tokens):
            raise NotConstant("unexpected tokens")
        return value

    def next(self):
        if self.index >= len(self.tokens):
            raise NotConstant("unexpected end of expression")
        self.index += 1
        return self.tokens[self.index - 1]

    def binary(self, min_prec):
        left = self.unary()
        while self.index < len(self.tokens):
            op = binary_ops.get(self.tokens[self.index][0])
            if op is None or op[0] < min_prec:
                break
            self.index += 1
            right = self.binary(op[0] + 1)
            left = op[1](left, right)
        return left

    def unary(self):
        tok_type, value = self.next()
        if tok_type == "PLUS":
            return self.unary()
        elif tok_type == "MINUS":
            return -self.unary()
        elif tok_type == "BITXOR":
            return ~self.unary()
        elif tok_type == "INT":
            try:
                return parse_int(value)
            except ValueError:
                raise NotConstant(value) from None
        elif tok_type == "ID":
            return self.lookup(value)
        elif tok_type == "LBRACK":
            result = self.binary(1)
            if self.next()[0] != "RBRACK":
                raise NotConstant("unbalanced parentheses")
            return result
        raise NotConstant(value)


def _spans_group(tokens):
    """Check if tokens are one bracketed group, like "(...)" or "{...}"."""
    depth = 0
    for i, (tok_type, _) in enumerate(tokens):
        if tok_type in ("LBRACK", "LSQBRACK", "LCURLBR"):
            depth += 1
        elif tok_type in ("RBRACK", "RSQBRACK", "RCURLBR"):
            depth -= 1
            if depth == 0:
                return i == len(tokens) - 1
    return False


def _tokens_of(expr):
    """Return the (type, value) tokens of a value expression."""
    if isinstance(expr, GoBasicLit):
        return [(expr.kind, expr.value)]
    elif isinstance(expr, GoIdent):
        return [("ID", expr.name)]
    return expr.tokens


def _closing(tokens, start=0):
    """Return the index of the bracket closing the one at start, or None."""
    depth = 0
    for i in range(start, len(tokens)):
        tok_type = tokens[i][0]
        if tok_type in ("LBRACK", "LSQBRACK", "LCURLBR"):
            depth += 1
        elif tok_type in ("RBRACK", "RSQBRACK", "RCURLBR"):
            depth -= 1
            if depth == 0:
                return i
    return None


class Checker:
    """The class for checking the declarations of one package.

    Package-level objects are declared first and resolved lazily, so that a
    declaration may refer to any other one regardless of their order. Each
    pending object maps to the function resolving its declaration; it is
    removed before that function runs, so a cyclic reference sees an object
    without a type.
    """

    def __init__(self, fset, pkg, info, importer=None):
        self.fset = fset
        self.pkg = pkg
        self.info = info
        self.importer = importer
        self.errors = []
        self.pending = {}
        self.bodies = []

    def error(self, msg, pos=NO_POS):
        err = GoTypeError(msg, self.fset.position(pos))
        logging.debug("type error: {}".format(err))
        self.errors.append(err)

    def define(self, ident, obj, scope=None):
        """Record the object defined by ident and insert it into scope."""
        if ident.name == "_":
            self.info.defs[ident] = None
            return
        self.info.defs[ident] = obj
        if scope is not None and scope.insert(obj) is not None:
            self.error(
                "{} redeclared in this block".format(ident.name), ident.pos
            )

    def defer(self, objs, resolver):
        for obj in objs:
            self.pending[obj] = (objs, resolver)

    def resolve(self, obj):
        """Resolve the declaration of obj, if that is still pending."""
        entry = self.pending.get(obj)
        if entry is None:
            return
        objs, resolver = entry
        for each in objs:
            self.pending.pop(each, None)
        resolver()

    def check_files(self, files):
        """Check the files of the package and return the errors found."""
        file_scopes = []
        for go_file in files:
            self.info.defs[go_file.name] = None
            if go_file.name.name != self.pkg.name:
                self.error(
                    "package {}; expected {}".format(
                        go_file.name.name, self.pkg.name
                    ),
                    go_file.name.pos,
                )
            scope = Scope(self.pkg.scope)
            self.collect_imports(go_file, scope)
            file_scopes.append(scope)

        for go_file, scope in zip(files, file_scopes):
            for decl in go_file.decls:
                self.declare(decl, scope)

        for obj in list(self.pending):
            self.resolve(obj)
        for decl, scope in self.bodies:
            self.check_body(decl, scope)
        return self.errors

    # =========================================================================
    # DECLARATIONS
    # =========================================================================

    def collect_imports(self, go_file, scope):
        for spec in go_file.imports:
            path = spec.import_path()
            if path == "unsafe":
                imported = unsafe
            else:
                imported = self.importer(path) if self.importer else None
            if imported is None:
                self.error('could not import "{}"'.format(path), spec.path.pos)
                imported = Package(path, path.split("/")[-1], fake=True)
            if imported not in self.pkg.imports:
                self.pkg.imports.append(imported)

            name = imported.name if spec.name is None else spec.name.name
            if name == ".":
                for obj in imported.scope.elems.values():
                    if obj.exported():
                        scope.insert(obj)
            elif spec.name is not None:
                pkg_name = PkgName(name, imported, self.pkg, spec.pos)
                self.define(spec.name, pkg_name, scope)
            else:
                scope.insert(PkgName(name, imported, self.pkg, spec.pos))

    def declare(self, decl, scope):
        if isinstance(decl, GoFuncDecl):
            self.declare_func(decl, scope)
        elif decl.tok == "const":
            self.declare_consts(decl, scope)
        elif decl.tok == "var":
            for spec in decl.specs:
                objs = [
                    Var(ident.name, None, self.pkg, ident.pos)
                    for ident in spec.names
                ]
                for ident, obj in zip(spec.names, objs):
                    self.define(ident, obj, self.pkg.scope)
                self.defer(objs, partial(self.resolve_vars, objs, spec, scope))
        elif decl.tok == "type":
            for spec in decl.specs:
                self.declare_type(spec, scope)

    def declare_consts(self, decl, scope):
        last = None  # The last spec with values, repeated by empty specs
        for iota, spec in enumerate(decl.specs):
            if spec.values or spec.type is not None:
                last = spec
            objs = [
                Const(ident.name, None, self.pkg, ident.pos)
                for ident in spec.names
            ]
            for ident, obj in zip(spec.names, objs):
                self.define(ident, obj, self.pkg.scope)
            self.defer(
                objs, partial(self.resolve_consts, objs, last, iota, scope)
            )

    def declare_type(self, spec, scope):
        obj = TypeName(
            spec.name.name,
            None,
            self.pkg,
            spec.name.pos,
            is_alias=spec.assign != NO_POS,
        )
        if not obj.is_alias:
            obj.type = Named(obj)
        self.define(spec.name, obj, self.pkg.scope)
        self.defer([obj], partial(self.resolve_type, obj, spec, scope))

    def declare_func(self, decl, scope):
        obj = Func(decl.name.name, None, self.pkg, decl.name.pos)
        if decl.recv is not None or decl.name.name == "init":
            self.define(decl.name, obj)  # Not in the package scope
        else:
            self.define(decl.name, obj, self.pkg.scope)
        func_scope = Scope(scope)
        self.defer([obj], partial(self.resolve_func, obj, decl, func_scope))
        if decl.body is not None:
            self.bodies.append((decl, func_scope))

    def resolve_consts(self, objs, spec, iota, scope):
        if spec is None:
            self.error("missing init expr for const declaration", objs[0].pos)
            for obj in objs:
                obj.type = invalid
            return

        dtype = None
        if spec.type is not None:
            dtype = self.type_of(spec.type, scope)
        if len(spec.values) != len(objs):
            self.error(
                "{} constants but {} values".format(
                    len(objs), len(spec.values)
                ),
                objs[0].pos,
            )
        for i, obj in enumerate(objs):
            if i >= len(spec.values):
                obj.type = invalid if dtype is None else dtype
                continue
            obj.value = self.constant(spec.values[i], scope, iota)
            if dtype is not None:
                obj.type = dtype
            else:
                obj.type = self.infer(spec.values[i], scope, iota)

    def resolve_vars(self, objs, spec, scope):
        dtype = None
        if spec.type is not None:
            dtype = self.type_of(spec.type, scope)
        if spec.values and len(spec.values) not in (1, len(objs)):
            self.error(
                "assignment mismatch: {} variables but {} values".format(
                    len(objs), len(spec.values)
                ),
                objs[0].pos,
            )
        if dtype is not None:
            types = [dtype] * len(objs)
        elif len(spec.values) == len(objs):
            types = [
                self.default(self.infer(value, scope)) for value in spec.values
            ]
        else:
            types = self.spread(spec.values, len(objs), scope)
        for obj, dtype in zip(objs, types):
            obj.type = dtype

    def resolve_type(self, obj, spec, scope):
        typ = self.type_of(spec.type, scope)
        if obj.is_alias:
            obj.type = typ
            return
        if isinstance(typ, Named) and typ.underlying is None:
            self.resolve(typ.obj)
        obj.type.set_underlying(typ)
        if obj.type.underlying is None:
            self.error("invalid recursive type {}".format(obj.name), obj.pos)
            obj.type.set_underlying(invalid)

    def resolve_func(self, obj, decl, func_scope):
        recv = None
        if decl.recv is not None:
            recv = self.receiver(decl.recv, func_scope)
        obj.type = self.signature(
            decl.type, func_scope.parent, func_scope, recv
        )
        if recv is None:
            return

        base = receiver_base(decl.recv.list[0].type)
        owner = None if base is None else self.pkg.scope.lookup(base.name)
        if not (
            isinstance(owner, TypeName)
            and isinstance(owner.type, Named)
            and owner.pkg is self.pkg
        ):
            self.error(
                "invalid receiver type for {}".format(obj.name), obj.pos
            )
            return
        named = owner.type
        if any(method.name == obj.name for method in named.methods):
            self.error(
                "method {}.{} already declared".format(
                    named.obj.name, obj.name
                ),
                obj.pos,
            )
            return
        named.add_method(obj)

    def receiver(self, field_list, scope):
        if field_list.num_fields() != 1:
            self.error("method has multiple receivers", field_list.pos)
        if not field_list.list:
            return None
        field = field_list.list[0]
        dtype = self.type_of(field.type, scope.parent)
        if not field.names:
            return Var("", dtype, self.pkg, field.type.pos)
        ident = field.names[0]
        var = Var(ident.name, dtype, self.pkg, ident.pos)
        self.define(ident, var, scope)
        return var

    def check_body(self, decl, scope):
        """Declare the variables of short variable declarations in a body."""
        for stmt in decl.body.list:
            if not isinstance(stmt, GoAssignStmt):
                continue
            if len(stmt.rhs) == len(stmt.lhs):
                types = [self.default(self.infer(v, scope)) for v in stmt.rhs]
            else:
                types = self.spread(stmt.rhs, len(stmt.lhs), scope)

            new = False
            for ident, dtype in zip(stmt.lhs, types):
                if ident.name == "_":
                    self.info.defs[ident] = None
                    new = True
                elif scope.lookup(ident.name) is None:
                    var = Var(ident.name, dtype, self.pkg, ident.pos)
                    self.define(ident, var, scope)
                    new = True
            if not new:
                self.error("no new variables on left side of :=", stmt.tok_pos)

    # =========================================================================
    # TYPES
    # =========================================================================

    def type_of(self, expr, scope):
        """Return the type denoted by a type expression."""
        if isinstance(expr, GoIdent):
            obj = scope.lookup_parent(expr.name)
            return self.type_name(expr.name, obj, expr.pos)
        elif isinstance(expr, GoSelectorExpr):
            return self.qualified_type(expr, scope)
        elif isinstance(expr, GoStarExpr):
            return Pointer(self.type_of(expr.x, scope))
        elif isinstance(expr, GoEllipsis):
            return Slice(self.type_of(expr.elt, scope))
        elif isinstance(expr, GoArrayType):
            elem = self.type_of(expr.elt, scope)
            if expr.len is None:
                return Slice(elem)
            return Array(elem, self.array_length(expr.len, scope))
        elif isinstance(expr, GoMapType):
            return Map(
                self.type_of(expr.key, scope), self.type_of(expr.value, scope)
            )
        elif isinstance(expr, GoChanType):
            return Chan(expr.dir, self.type_of(expr.value, scope))
        elif isinstance(expr, GoFuncType):
            return self.signature(expr, scope)
        elif isinstance(expr, GoStructType):
            return self.struct_type(expr, scope)
        elif isinstance(expr, GoInterfaceType):
            return self.interface_type(expr, scope)
        self.error("{} is not a type".format(format_node(expr)), expr.pos)
        return invalid

    def type_name(self, name, obj, pos):
        if obj is None:
            self.error("undefined: {}".format(name), pos)
            return invalid
        if not isinstance(obj, TypeName):
            self.error("{} is not a type".format(name), pos)
            return invalid
        if obj.is_alias:
            self.resolve(obj)
        return invalid if obj.type is None else obj.type

    def qualified_type(self, expr, scope):
        pkg_name = None
        if isinstance(expr.x, GoIdent):
            pkg_name = scope.lookup_parent(expr.x.name)
        if not isinstance(pkg_name, PkgName):
            self.error("undefined: {}".format(format_node(expr.x)), expr.pos)
            return invalid
        imported = pkg_name.imported
        if imported.fake:  # Already reported as an import error
            return invalid
        obj = imported.scope.lookup(expr.sel.name)
        if obj is None or not obj.exported():
            self.error("undefined: {}".format(format_node(expr)), expr.pos)
            return invalid
        return self.type_name(format_node(expr), obj, expr.pos)

    def signature(self, func_type, scope, declare_in=None, recv=None):
        """Make a `Signature`, declaring named params in declare_in."""
        params, variadic = self.tuple(
            func_type.params, scope, declare_in, True
        )
        results = Tuple()
        if func_type.results is not None:
            results, _ = self.tuple(func_type.results, scope, declare_in)
        return Signature(params, results, recv, variadic)

    def tuple(self, field_list, scope, declare_in=None, variadic_ok=False):
        variables = []
        variadic = False
        last = len(field_list.list) - 1
        for i, field in enumerate(field_list.list):
            if isinstance(field.type, GoEllipsis):
                if variadic_ok and i == last and len(field.names) <= 1:
                    variadic = True
                else:
                    self.error(
                        "can only use ... with final parameter in list",
                        field.type.pos,
                    )
            dtype = self.type_of(field.type, scope)
            if not field.names:
                variables.append(Var("", dtype, self.pkg, field.type.pos))
            for ident in field.names:
                var = Var(ident.name, dtype, self.pkg, ident.pos)
                self.define(ident, var, declare_in)
                variables.append(var)
        return Tuple(variables), variadic

    def struct_type(self, expr, scope):
        fields = []
        tags = []
        seen = set()
        for field in expr.fields.list:
            dtype = self.type_of(field.type, scope)
            tag = "" if field.tag is None else field.tag.value
            if field.names:
                idents = field.names
                embedded = False
            else:
                ident = base_ident(field.type)
                if ident is None:
                    self.error("invalid embedded field type", field.type.pos)
                    continue
                idents = [ident]
                embedded = True
            for ident in idents:
                var = Var(
                    ident.name,
                    dtype,
                    self.pkg,
                    ident.pos,
                    is_field=True,
                    embedded=embedded,
                )
                if ident.name != "_" and ident.name in seen:
                    self.error("{} redeclared".format(ident.name), ident.pos)
                seen.add(ident.name)
                self.define(ident, var)
                fields.append(var)
                tags.append(tag)
        return Struct(fields, tags)

    def interface_type(self, expr, scope):
        iface = Interface([])
        for field in expr.methods.list:
            if not field.names:
                iface.embeddeds.append(self.type_of(field.type, scope))
                continue
            ident = field.names[0]
            method = Func(ident.name, None, self.pkg, ident.pos)
            method.type = self.signature(
                field.type, scope, recv=Var("", iface, self.pkg)
            )
            self.define(ident, method)
            iface.methods.append(method)
        return iface

    def array_length(self, expr, scope):
        length = self.constant(expr, scope)
        if length is None or length < 0:
            self.error(
                "invalid array length {}".format(format_node(expr)), expr.pos
            )
            return -1
        return length

    # =========================================================================
    # VALUES
    # =========================================================================

    def constant(self, expr, scope, iota=None):
        """Return the integer value of a constant expression, or None."""
        return self.constant_tokens(_tokens_of(expr), scope, iota)

    def constant_tokens(self, tokens, scope, iota=None):
        def lookup(name):
            obj = scope.lookup_parent(name)
            if obj is universe.lookup("iota") and iota is not None:
                return iota
            if isinstance(obj, Const):
                self.resolve(obj)
                if isinstance(obj.value, int) and not isinstance(
                    obj.value, bool
                ):
                    return obj.value
            raise NotConstant(name)

        try:
            return ConstEvaluator(tokens, lookup).evaluate()
        except NotConstant:
            return None

    def default(self, typ):
        """Return the type a variable gets for a value of type typ."""
        if getattr(typ, "untyped", False):
            return default_types[typ.name]
        return typ

    def infer(self, expr, scope, iota=None):
        """Return the type of a value expression, or the invalid type.

        Literals, identifiers, integer constant expressions, composite
        literals, conversions, calls of functions with one result and calls
        of make and new are understood.
        """
        tokens = _tokens_of(expr)
        if len(tokens) == 1 and tokens[0][0] in untyped:
            return untyped[tokens[0][0]]
        if len(tokens) == 1 and tokens[0][0] == "ID":
            return self.ident_type(tokens[0][1], scope, iota)
        if self.constant_tokens(tokens, scope, iota) is not None:
            return untyped["INT"]

        pointer = tokens[0][0] == "BITAND"
        if pointer:
            tokens = tokens[1:]
        typ, rest = self.leading_type(tokens, scope)
        if typ is not None and rest and _spans_group(rest):
            if rest[0][0] == "LCURLBR":  # Composite literal
                return Pointer(typ) if pointer else typ
            if rest[0][0] == "LBRACK" and not pointer:  # Conversion
                return typ
        if pointer:
            return invalid

        results = self.call_results(tokens, scope)
        if results is not None and len(results) == 1:
            return results[0]
        return invalid

    def spread(self, values, count, scope):
        """Return the types of count variables assigned from values.

        values is a single call of a function with count results; for
        anything else the variables get the invalid type.
        """
        if len(values) == 1:
            results = self.call_results(_tokens_of(values[0]), scope)
            if results is not None and len(results) == count:
                return results
        return [invalid] * count

    def call_results(self, tokens, scope):
        """Return the result types of the call in tokens, or None.

        Calls of package functions and of the inbuilt make and new are
        understood; make gives its type argument and new a pointer to it.
        """
        obj, rest = self.leading_object(tokens, scope)
        if obj is None or not rest or rest[0][0] != "LBRACK":
            return None
        if not _spans_group(rest):
            return None
        make, new = universe.lookup("make"), universe.lookup("new")
        if obj is make or obj is new:
            typ, after = self.leading_type(rest[1:], scope)
            if typ is None or not after:
                return None
            if after[0][0] not in ("COMMA", "RBRACK"):
                return None
            return [typ] if obj is make else [Pointer(typ)]
        if isinstance(obj, Func):
            self.resolve(obj)
            if isinstance(obj.type, Signature):
                return [var.type for var in obj.type.results.vars]
        return None

    def leading_type(self, tokens, scope):
        """Return the type written at the start of tokens, and the rest.

        Type names, pointers, arrays, slices, maps and channels are read,
        which covers the types of composite literals and of make and new.
        Returns (None, tokens) if tokens do not start with such a type.
        Nothing is reported, since tokens may as well start a value.
        """
        if not tokens:
            return None, tokens
        tok_type = tokens[0][0]
        if tok_type == "ID":
            obj, rest = self.leading_object(tokens, scope)
            if not isinstance(obj, TypeName):
                return None, tokens
            if obj.is_alias:
                self.resolve(obj)
            return obj.type, rest
        elif tok_type == "MULT":
            elem, rest = self.leading_type(tokens[1:], scope)
            if elem is None:
                return None, tokens
            return Pointer(elem), rest
        elif tok_type == "LSQBRACK":
            close = _closing(tokens)
            if close is None:
                return None, tokens
            elem, rest = self.leading_type(tokens[close + 1 :], scope)
            if elem is None:
                return None, tokens
            length_tokens = tokens[1:close]
            if not length_tokens:
                return Slice(elem), rest
            if [tok for tok, _ in length_tokens] == ["TRIDOT"]:
                # The length of "[...]T{...}" is not counted
                return Array(elem, -1), rest
            length = self.constant_tokens(length_tokens, scope)
            if length is None:
                return None, tokens
            return Array(elem, length), rest
        elif tok_type == "MAP":
            if len(tokens) < 2 or tokens[1][0] != "LSQBRACK":
                return None, tokens
            close = _closing(tokens, 1)
            if close is None:
                return None, tokens
            key, after = self.leading_type(tokens[2:close], scope)
            value, rest = self.leading_type(tokens[close + 1 :], scope)
            if key is None or after or value is None:
                return None, tokens
            return Map(key, value), rest
        elif tok_type in ("CHAN", "REC"):
            if tok_type == "REC":
                if len(tokens) < 2 or tokens[1][0] != "CHAN":
                    return None, tokens
                direction, start = ChanDir.RECV, 2
            elif tokens[1:2] and tokens[1][0] == "REC":
                direction, start = ChanDir.SEND, 2
            else:
                direction, start = ChanDir.BOTH, 1
            elem, rest = self.leading_type(tokens[start:], scope)
            if elem is None:
                return None, tokens
            return Chan(direction, elem), rest
        return None, tokens

    def ident_type(self, name, scope, iota=None):
        obj = scope.lookup_parent(name)
        if obj is universe.lookup("iota") and iota is not None:
            return untyped["INT"]
        if isinstance(obj, (Var, Const, Func)):
            self.resolve(obj)
            return invalid if obj.type is None else obj.type
        return invalid

    def leading_object(self, tokens, scope):
        """Return the object named by "ID" or "ID . ID" at the start."""
        if not tokens or tokens[0][0] != "ID":
            return None, tokens
        obj = scope.lookup_parent(tokens[0][1])
        if isinstance(obj, PkgName):
            if len(tokens) < 3 or tokens[1][0] != "DOT":
                return None, tokens
            if tokens[2][0] != "ID":
                return None, tokens
            if obj.imported.fake:
                return None, tokens
            member = obj.imported.scope.lookup(tokens[2][1])
            return member, tokens[3:]
        return obj, tokens[1:]


def check_package(fset, path, files, importer=None):
    """Check the files of one package.

    Args:
        fset (`FileSet`): The file set the files were parsed into
        path (str): The import path of the package
        files (list of `GoFile`): The parsed files
        importer (callable): Called with an import path; returns the checked
            `Package`, or None if it cannot be imported

    Returns:
        tuple: The `Package`, its `Info` and the list of `GoTypeError`s

    """
    name = files[0].name.name if files else path.split("/")[-1]
    pkg = Package(path, name)
    info = Info()
    checker = Checker(fset, pkg, info, importer)
    errors = checker.check_files(files)
    logging.debug(
        "checked {}: {} definitions, {} errors".format(
            path, len(info.defs), len(errors)
        )
    )
    return pkg, info, errors
