"""The facade of a single declared object."""
from .kinds import DeclKind, get_decl_kind, get_type_kind


class Facade:
    """For one declared object of a package, with the identifier declaring it.

    The kinds are computed from the object whenever they are asked for.
    Type facades own a `TypeNode`, and function facades a `FuncNode`; both
    are built the first time they are needed.
    """

    def __init__(self, pkg, ident, obj, doc=None):
        self.pkg = pkg
        self.ident = ident
        self.obj = obj
        self.doc_group = doc
        self._type_node = None
        self._func_node = None

    def name(self):
        return self.ident.name

    def object(self):
        return self.obj

    def package(self):
        return self.pkg

    def decl_kind(self):
        return get_decl_kind(self.obj)

    def type_kind(self):
        return get_type_kind(self.obj.type)

    def typ(self):
        """Return the type declared by a type facade, else the object's."""
        if self.decl_kind() == DeclKind.TYPE and self.obj.type is not None:
            return self.obj.type.underlying
        return self.obj.type

    def doc(self):
        return "" if self.doc_group is None else self.doc_group.text()

    def preview(self):
        """Return the formatted declaration of the object, with comments."""
        return self.pkg.preview(self.ident)

    def type_node(self):
        """Return the `TypeNode` of a type facade and whether it exists."""
        if self._type_node is None and self.decl_kind() == DeclKind.TYPE:
            self._type_node = self.pkg.new_type_node(self.ident, self.obj)
        return self._type_node, self._type_node is not None

    def func_node(self):
        """Return the `FuncNode` of a function facade and whether it exists."""
        if self._func_node is None and self.decl_kind() == DeclKind.FUNCTION:
            self._func_node = self.pkg.func_node(self.ident)
        return self._func_node, self._func_node is not None

    def method(self, i):
        node, found = self.type_node()
        if not found:
            return None, False
        return node.method(i)

    def method_by_name(self, name):
        node, found = self.type_node()
        if not found:
            return None, False
        return node.method_by_name(name)

    def num_method(self):
        node, found = self.type_node()
        return node.num_method() if found else 0

    def implements(self, u):
        """Check if the type of this facade has all methods of u.

        u is another type facade, or a `TypeNode`.
        """
        node, found = self.type_node()
        if not found:
            return False
        if isinstance(u, Facade):
            u, found = u.type_node()
            if not found:
                return False
        return node.implements(u)

    def __str__(self):
        return "{}.{}".format(self.pkg, self.name())

    def __repr__(self):
        return "<Facade {} {} {}>".format(
            self, self.decl_kind().label(), self.type_kind().label()
        )
