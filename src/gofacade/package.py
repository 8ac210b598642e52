"""The index of the facades of one package."""
import logging

from .facade import Facade
from .go_ast import (
    GoAssignStmt,
    GoField,
    GoFile,
    GoFuncDecl,
    GoGenDecl,
    GoIdent,
    GoInterfaceType,
    GoSelectorExpr,
    GoStarExpr,
    GoTypeSpec,
    GoValueSpec,
    path_enclosing_interval,
    receiver_base,
)
from .gotypes import TypeName
from .kinds import DeclKind, TypeKind, get_decl_kind, get_type_kind
from .positions import NO_POS
from .printer import format_node
from .type_node import FuncNode, new_type_node

# Objects which never get a facade
skipped_kinds = DeclKind.BAD | DeclKind.LABEL | DeclKind.BUILTIN | DeclKind.NIL


def _declared_in_field(path):
    """Check if the identifier at the start of path is declared by a field.

    Pointer and qualified type wrappers around an embedded field's
    identifier are looked through.
    """
    for node in path[1:]:
        if isinstance(node, (GoStarExpr, GoSelectorExpr)):
            continue
        return isinstance(node, GoField)
    return False


class PackageInfo:
    """For the syntax trees, checker facts and facades of one package.

    Args:
        prog (`Program`): The program the package belongs to
        pkg (`Package`): The checked package
        files (list of `GoFile`): The syntax trees of its files
        info (`Info`): The facts derived by the checker
        errors (list of `GoException`): The syntax and type errors found
        importable (bool): True if the package can be imported by its path
        transitively_error_free (bool): True if the package and all of its
            dependencies are free of errors

    """

    def __init__(
        self,
        prog,
        pkg,
        files,
        info,
        errors=None,
        importable=True,
        transitively_error_free=True,
    ):
        self.prog = prog
        self.pkg = pkg
        self.files = files
        self.info = info
        self.errors = list(errors) if errors else []
        self.importable = importable
        self.transitively_error_free = transitively_error_free
        self.facades = []
        self._func_nodes = {}  # GoFuncDecl -> FuncNode

    def path(self):
        return self.pkg.path

    def __str__(self):
        return self.pkg.path

    def __repr__(self):
        return "<PackageInfo {}>".format(self.pkg.path)

    def check(self):
        """Make the facades of every object declared in the package."""
        logging.info("Checking package {}...".format(self))
        for ident, obj in self.info.defs.items():
            kind = get_decl_kind(obj)
            if kind & skipped_kinds:
                continue
            if (
                kind == DeclKind.VARIABLE
                and get_type_kind(obj.type) != TypeKind.STRUCT
            ):
                path, _ = self.path_enclosing_interval(ident.pos, ident.end)
                if _declared_in_field(path):
                    continue
            self.add_facade(ident, obj)
        logging.debug(
            "{} facades in package {}".format(len(self.facades), self)
        )

    # =========================================================================
    # QUERIES
    # =========================================================================

    def inspect(self, fn):
        """Call fn with each facade, in order, until it returns false."""
        for facade in self.facades:
            if not fn(facade):
                return

    def lookup(self, decl_kinds=0, type_kinds=0, name=""):
        """Return the facades matching all of the given filters.

        Args:
            decl_kinds (`DeclKind`): The declaration kinds to match; 0
                matches any
            type_kinds (`TypeKind`): The type kinds to match; 0 matches any
            name (str): The exact name to match; "" matches any

        """
        found = []

        def match(facade):
            if (
                (name == "" or facade.name() == name)
                and facade.type_kind().in_set(type_kinds)
                and facade.decl_kind().in_set(decl_kinds)
            ):
                found.append(facade)
            return True

        self.inspect(match)
        return found

    def find_facade(self, typ):
        """Return the facade declaring the type typ and whether it exists."""
        facade, idx = self.get_facade_by_type(typ)
        return facade, idx != -1

    def get_facade(self, ident):
        for idx, facade in enumerate(self.facades):
            if facade.ident is ident:
                return facade, idx
        return None, -1

    def get_facade_by_object(self, obj):
        for idx, facade in enumerate(self.facades):
            if facade.obj is obj:
                return facade, idx
        return None, -1

    def get_facade_by_type(self, typ):
        for idx, facade in enumerate(self.facades):
            if facade.obj.type is typ or facade.typ() is typ:
                return facade, idx
        return None, -1

    def add_facade(self, ident, obj):
        facade = Facade(self, ident, obj, self.doc_comment(ident))
        self.facades.append(facade)
        return facade

    def remove_facade(self, ident):
        _, idx = self.get_facade(ident)
        if idx >= 0:
            del self.facades[idx]

    def remove_facade_by_object(self, obj):
        _, idx = self.get_facade_by_object(obj)
        if idx >= 0:
            del self.facades[idx]

    # =========================================================================
    # SYNTAX
    # =========================================================================

    def path_enclosing_interval(self, start, end):
        """Return the path to the node enclosing [start, end) in any file.

        Returns:
            tuple: The nodes from the innermost one up to the file, and
                whether the innermost node spans the interval exactly; ([],
                False) if no file contains the interval

        """
        for go_file in self.files:
            if go_file.pos == NO_POS:
                continue
            src_file = self.prog.fset.file(go_file.pos)
            if src_file is None or not src_file.contains(start):
                continue
            path, exact = path_enclosing_interval(go_file, start, end)
            if path:
                return path, exact
        return [], False

    def doc_comment(self, ident):
        """Return the comment group documenting ident, or None.

        The first enclosing declaration, spec or field decides. The search
        stops at the first enclosing node of any other kind.
        """
        path, _ = self.path_enclosing_interval(ident.pos, ident.end)
        for node in path:
            if isinstance(node, (GoFuncDecl, GoField, GoGenDecl)):
                return node.doc
            elif isinstance(node, (GoTypeSpec, GoValueSpec)):
                # Without a doc of its own, the spec uses its declaration's
                if node.doc is not None:
                    return node.doc
            elif not isinstance(node, GoIdent):
                return None
        return None

    def format_node(self, node):
        return format_node(node)

    def preview(self, ident):
        """Return the formatted declaration of ident, with its comments."""
        path, _ = self.path_enclosing_interval(ident.pos, ident.end)
        for node in path:
            if isinstance(node, (GoFuncDecl, GoGenDecl, GoAssignStmt)):
                return self.format_node(node)
            elif isinstance(node, GoField):
                lines = []
                if node.doc is not None:
                    lines = [
                        "// " + line for line in node.doc.text().splitlines()
                    ]
                name = node.names[0].name if node.names else ident.name
                lines.append(
                    "var {} {}".format(name, self.format_node(node.type))
                )
                return "\n".join(lines)
            elif isinstance(node, GoFile):
                return "package " + ident.name
        return "// gofacade: can not preview " + ident.name

    # =========================================================================
    # TYPE AND FUNCTION NODES
    # =========================================================================

    def method_decl_node(self, decl):
        """Return the (shared) `FuncNode` of a function declaration."""
        node = self._func_nodes.get(decl)
        if node is None:
            node = FuncNode(decl.name, decl.type, decl.doc, decl.recv)
            self._func_nodes[decl] = node
        return node

    def methods_of(self, name):
        """Return the `FuncNode`s of the methods declared on type name."""
        methods = []
        for go_file in self.files:
            for decl in go_file.decls:
                if not isinstance(decl, GoFuncDecl) or decl.recv is None:
                    continue
                if not decl.recv.list:
                    continue
                base = receiver_base(decl.recv.list[0].type)
                if base is not None and base.name == name:
                    methods.append(self.method_decl_node(decl))
        return methods

    def type_spec(self, ident):
        """Return the `GoTypeSpec` whose name is ident, or None."""
        path, _ = self.path_enclosing_interval(ident.pos, ident.end)
        if len(path) < 2 or not isinstance(path[1], GoTypeSpec):
            return None
        spec = path[1]
        return spec if spec.name is ident else None

    def new_type_node(self, ident, obj):
        """Build the `TypeNode` for the type declared by ident.

        Returns None if ident is not the name of a type spec.
        """
        spec = self.type_spec(ident)
        if spec is None:
            return None
        node = new_type_node(
            spec,
            self.doc_comment(ident),
            obj.type,
            self.type_node_by_name,
            self.type_spec_by_name,
        )
        for method in self.methods_of(ident.name):
            node.add_method(method)
        return node

    def type_facade_by_name(self, name):
        obj = self.pkg.scope.lookup(name)
        if not isinstance(obj, TypeName):
            return None
        facade, _ = self.get_facade_by_object(obj)
        return facade

    def type_spec_by_name(self, name):
        """Return the `GoTypeSpec` of the package-level type name, or None."""
        facade = self.type_facade_by_name(name)
        return None if facade is None else self.type_spec(facade.ident)

    def type_node_by_name(self, name):
        """Return the `TypeNode` of the package-level type name, or None."""
        facade = self.type_facade_by_name(name)
        return None if facade is None else facade.type_node()[0]

    def func_node(self, ident):
        """Return the `FuncNode` for the function named by ident, or None.

        Methods of a named interface are the ones owned by its type node.
        """
        path, _ = self.path_enclosing_interval(ident.pos, ident.end)
        if len(path) < 2:
            return None
        parent = path[1]
        if isinstance(parent, GoFuncDecl) and parent.name is ident:
            return self.method_decl_node(parent)
        if not isinstance(parent, GoField) or len(path) < 4:
            return None
        if not isinstance(path[3], GoInterfaceType):
            return None
        if len(path) > 4 and isinstance(path[4], GoTypeSpec):
            owner = self.type_node_by_name(path[4].name.name)
            if owner is not None:
                method, found = owner.method_by_name(ident.name)
                if found:
                    return method
        return FuncNode(ident, parent.type, parent.doc)
