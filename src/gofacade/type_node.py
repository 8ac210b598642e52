"""Editable models of declared types, functions, struct fields and tags.

Every model wraps syntax nodes and edits them in place: renaming a type,
replacing a field's doc or changing its tags is visible to anything else
holding the same nodes, and to a later render of the file.
"""
import logging
from collections import namedtuple
from enum import Enum

from .checker import parse_int
from .errors import MethodError, TagSyntaxError
from .go_ast import (
    GoArrayType,
    GoBasicLit,
    GoChanType,
    GoEllipsis,
    GoField,
    GoFieldList,
    GoFuncType,
    GoIdent,
    GoInterfaceType,
    GoMapType,
    GoStructType,
    base_ident,
    new_comment_group,
    receiver_base,
)
from .gotypes import Array
from .kinds import TypeKind, basic_kind
from .positions import NO_POS
from .printer import format_node

# A parameter, result or receiver: its name ("" if unnamed) and its type
FieldInfo = namedtuple("FieldInfo", ["name", "type_name"])


def _text(group):
    return "" if group is None else group.text()


# =============================================================================
# FUNCTIONS
# =============================================================================


class FuncNode:
    """For a function, a method or an interface method.

    Args:
        ident (`GoIdent`): The name of the function
        func_type (`GoFuncType`): Its signature
        doc (`GoCommentGroup`): Its doc comment, if any
        recv (`GoFieldList` or `TypeNode`): The receiver list of a method
            declaration, or the interface type owning an interface method

    """

    def __init__(self, ident, func_type, doc=None, recv=None):
        self.ident = ident
        self.func_type = func_type
        self.doc_group = doc
        self.recv_source = recv
        self.params = self._expand(func_type.params)
        if func_type.results is None:
            self.results = []
        else:
            self.results = self._expand(func_type.results)

    @staticmethod
    def _expand(field_list):
        infos = []
        for field in field_list.list:
            type_name = format_node(field.type)
            if not field.names:
                infos.append(FieldInfo("", type_name))
            for ident in field.names:
                infos.append(FieldInfo(ident.name, type_name))
        return infos

    def name(self):
        return self.ident.name

    def doc(self):
        return _text(self.doc_group)

    def recv(self):
        """Return the receiver and whether there is one.

        The receiver's type name has its pointer indirections removed.
        """
        source = self.recv_source
        if source is None:
            return None, False
        if isinstance(source, TypeNode):
            return FieldInfo("", source.name()), True
        if not source.list:
            return None, False
        field = source.list[0]
        name = field.names[0].name if field.names else ""
        base = receiver_base(field.type)
        if base is None:
            return FieldInfo(name, format_node(field.type).lstrip("*")), True
        return FieldInfo(name, base.name), True

    def rename_receiver(self, name):
        """Point a method declaration's receiver at a renamed type."""
        if isinstance(self.recv_source, GoFieldList) and self.recv_source.list:
            base = receiver_base(self.recv_source.list[0].type)
            if base is not None:
                base.name = name

    def num_param(self):
        return len(self.params)

    def num_result(self):
        return len(self.results)

    def param(self, i):
        """Return the i'th parameter and whether it exists."""
        if i < 0 or i >= len(self.params):
            return None, False
        return self.params[i], True

    def result(self, i):
        """Return the i'th result and whether it exists."""
        if i < 0 or i >= len(self.results):
            return None, False
        return self.results[i], True

    def is_variadic(self):
        fields = self.func_type.params.list
        return bool(fields) and isinstance(fields[-1].type, GoEllipsis)

    def __repr__(self):
        return "<FuncNode {}>".format(self.name())


# =============================================================================
# TYPES
# =============================================================================


class Variant(Enum):
    """For the variants of `TypeNode`."""

    ALIAS = "alias"
    BASIC = "basic"
    LIST = "list"
    MAP = "map"
    CHAN = "chan"
    INTERFACE = "interface"
    STRUCT = "struct"


class TypeNode:
    """The base class for declared types.

    A type node owns the list of methods attached to it. Its name is the
    identifier of the type spec, so renaming it renames the declaration.
    """

    variant = None

    def __init__(self, spec, kind, doc=None):
        self.spec = spec
        self.ident = spec.name
        self.kind = kind
        self.doc_group = doc
        self.methods = []

    def name(self):
        return self.ident.name

    def set_name(self, name):
        """Rename the type, its declaration and its methods' receivers."""
        self.ident.name = name
        for method in self.methods:
            method.rename_receiver(name)

    def type_kind(self):
        return self.kind

    def doc(self):
        return _text(self.doc_group)

    def expr(self):
        """Return the type expression of the declaration."""
        return self.spec.type

    def is_assign(self):
        """Check if the type was declared with "=" (an alias declaration)."""
        return self.spec.assign != NO_POS

    def method(self, i):
        """Return the i'th method and whether it exists."""
        if i < 0 or i >= len(self.methods):
            return None, False
        return self.methods[i], True

    def method_by_name(self, name):
        """Return the first method with the name and whether it exists."""
        for method in self.methods:
            if method.name() == name:
                return method, True
        return None, False

    def num_method(self):
        return len(self.methods)

    def add_method(self, method):
        """Append a method whose receiver is this type.

        Raises:
            MethodError: If method has no receiver, or its receiver's type
                name is not the name of this type

        """
        recv, found = method.recv()
        if not found:
            raise MethodError("not method: {}".format(method.name()))
        if recv.type_name != self.name():
            raise MethodError(
                "receiver does not match method: {}, want: {}, got: {}".format(
                    method.name(), self.name(), recv.type_name
                )
            )
        self.methods.append(method)

    def implements(self, u):
        """Check if this type has every method of the type node u.

        Methods are matched by name, then by variadic-ness, the number of
        params and results, and the names of their types.
        """
        for i in range(u.num_method()):
            um, _ = u.method(i)
            cm, found = self.method_by_name(um.name())
            if (
                not found
                or um.is_variadic() != cm.is_variadic()
                or um.num_param() != cm.num_param()
                or um.num_result() != cm.num_result()
            ):
                return False
            for j in range(um.num_param()):
                if um.param(j)[0].type_name != cm.param(j)[0].type_name:
                    return False
            for j in range(um.num_result()):
                if um.result(j)[0].type_name != cm.result(j)[0].type_name:
                    return False
        return True

    def __repr__(self):
        return "<{} {}>".format(type(self).__name__, self.name())


class AliasType(TypeNode):
    """For types declared as another named type or a function type."""

    variant = Variant.ALIAS


class BasicType(TypeNode):
    """For types declared as an inbuilt type (or a pointer to one)."""

    variant = Variant.BASIC


class ListType(TypeNode):
    """For array and slice types."""

    variant = Variant.LIST

    def __init__(self, spec, kind, doc=None, typ=None):
        super().__init__(spec, kind, doc)
        self.typ = typ

    def length(self):
        """Return the length of an array type and whether it is known.

        Slices have no length; an array whose length is neither a literal nor
        resolved by the checker reports (-1, False) too.
        """
        if self.kind == TypeKind.SLICE:
            return -1, False
        length = self.spec.type.len
        if isinstance(length, GoBasicLit) and length.kind == "INT":
            try:
                return parse_int(length.value), True
            except ValueError:
                pass
        underlying = None if self.typ is None else self.typ.underlying
        if isinstance(underlying, Array) and underlying.length >= 0:
            return underlying.length, True
        return -1, False


class MapType(TypeNode):
    """For map types."""

    variant = Variant.MAP


class ChanType(TypeNode):
    """For channel types."""

    variant = Variant.CHAN

    def dir(self):
        return self.spec.type.dir


class InterfaceType(TypeNode):
    """For interface types; the declared methods are attached at once.

    lookup_spec is called with a type name and returns the `GoTypeSpec`
    declaring it in the same package, or None. The methods of embedded
    interfaces found with it are attached after the interface's own ones,
    with this interface as their receiver.
    """

    variant = Variant.INTERFACE

    def __init__(self, spec, kind, doc=None, lookup_spec=None):
        super().__init__(spec, kind, doc)
        self.lookup_spec = lookup_spec
        self.collect_methods(spec.type, {self.name()})

    def collect_methods(self, iface, seen):
        embedded = []
        for field in iface.methods.list:
            if not field.names:
                if isinstance(field.type, GoIdent):
                    embedded.append(field.type.name)
            # The same method may come from several embedded interfaces
            elif not self.method_by_name(field.names[0].name)[1]:
                self.add_method(
                    FuncNode(field.names[0], field.type, field.doc, self)
                )

        for name in embedded:
            if name in seen or self.lookup_spec is None:
                continue
            seen.add(name)
            other = self.lookup_spec(name)
            if other is not None and isinstance(other.type, GoInterfaceType):
                self.collect_methods(other.type, seen)


def expand_fields(field_list):
    """Split fields declaring several names into one field per name.

    Each new field gets its own copy of the tag, so that tags can be edited
    independently. The doc stays on the first field, the line comment on the
    last.
    """
    expanded = []
    for field in field_list.list:
        if len(field.names) <= 1:
            expanded.append(field)
            continue
        last = len(field.names) - 1
        for i, ident in enumerate(field.names):
            tag = field.tag
            if tag is not None and i > 0:
                tag = GoBasicLit(tag.kind, tag.value, NO_POS)
            expanded.append(
                GoField(
                    [ident],
                    field.type,
                    tag,
                    field.doc if i == 0 else None,
                    field.comment if i == last else None,
                )
            )
    field_list.list = expanded


class StructType(TypeNode):
    """For struct types.

    lookup_type is called with a type name and returns the `TypeNode`
    declared with that name in the same package, or None; it is used to find
    fields promoted from embedded structs.
    """

    variant = Variant.STRUCT

    def __init__(self, spec, kind, doc=None, lookup_type=None):
        super().__init__(spec, kind, doc)
        self.lookup_type = lookup_type
        expand_fields(spec.type.fields)
        self.fields = [StructField(field) for field in spec.type.fields.list]

    def num_field(self):
        return len(self.fields)

    def field(self, i):
        """Return the i'th field and whether it exists."""
        if i < 0 or i >= len(self.fields):
            return None, False
        return self.fields[i], True

    def field_by_name(self, name):
        """Return the field with the name and whether it exists.

        Fields declared in this struct are looked at first, then the fields
        promoted from embedded structs, shallowest first.
        """
        for field in self.fields:
            if field.name() == name:
                return field, True
        if self.lookup_type is None:
            return None, False

        level = [self]
        seen = {self.name()}
        while level:
            next_level = []
            for struct in level:
                for field in struct.fields:
                    if not field.anonymous() or field.name() in seen:
                        continue
                    seen.add(field.name())
                    embedded = self.lookup_type(field.name())
                    if isinstance(embedded, StructType):
                        next_level.append(embedded)
            for struct in next_level:
                for field in struct.fields:
                    if field.name() == name:
                        return field, True
            level = next_level
        return None, False


variant_classes = {
    cls.variant: cls
    for cls in (
        AliasType,
        BasicType,
        ListType,
        MapType,
        ChanType,
        InterfaceType,
        StructType,
    )
}


def type_variant(expr):
    """Return the `Variant` and the `TypeKind` of a declared type expression.

    Named types which are not inbuilt are aliases of unknown kind; the
    checker decides what they stand for.
    """
    if isinstance(expr, GoArrayType):
        if expr.len is None:
            return Variant.LIST, TypeKind.SLICE
        return Variant.LIST, TypeKind.ARRAY
    elif isinstance(expr, GoMapType):
        return Variant.MAP, TypeKind.MAP
    elif isinstance(expr, GoChanType):
        return Variant.CHAN, TypeKind.CHAN
    elif isinstance(expr, GoInterfaceType):
        return Variant.INTERFACE, TypeKind.INTERFACE
    elif isinstance(expr, GoStructType):
        return Variant.STRUCT, TypeKind.STRUCT
    elif isinstance(expr, GoFuncType):
        return Variant.ALIAS, TypeKind.FUNC

    kind, found = basic_kind(format_node(expr).lstrip("*"))
    if found:
        return Variant.BASIC, kind
    return Variant.ALIAS, TypeKind.SUSPENSE


def new_type_node(
    spec, doc=None, typ=None, lookup_type=None, lookup_spec=None
):
    """Make the type node for a type spec.

    Args:
        spec (`GoTypeSpec`): The declaration
        doc (`GoCommentGroup`): The doc comment of the declaration
        typ (`GoBaseType`): The type the checker gave the declaration, used
            for array lengths given by constants
        lookup_type (callable): See `StructType`
        lookup_spec (callable): See `InterfaceType`

    Returns:
        `TypeNode`: The node of the variant matching the type expression

    """
    variant, kind = type_variant(spec.type)
    cls = variant_classes[variant]
    if variant == Variant.LIST:
        return cls(spec, kind, doc, typ)
    elif variant == Variant.STRUCT:
        return cls(spec, kind, doc, lookup_type)
    elif variant == Variant.INTERFACE:
        return cls(spec, kind, doc, lookup_spec)
    return cls(spec, kind, doc)


# =============================================================================
# STRUCT FIELDS
# =============================================================================


class StructField:
    """For a single field in a struct, with its tags."""

    def __init__(self, field):
        self.field = field
        self.tags = StructTag(field)

    def name(self):
        """Return the field name, or the type name of an anonymous field."""
        if not self.anonymous():
            return self.field.names[0].name
        ident = base_ident(self.field.type)
        return "" if ident is None else ident.name

    def type_name(self):
        return format_node(self.field.type)

    def anonymous(self):
        return len(self.field.names) == 0

    def doc(self):
        return _text(self.field.doc)

    def set_doc(self, text):
        """Replace the lead comment with one holding text."""
        self.field.doc = new_comment_group(text)

    def comment(self):
        return _text(self.field.comment)

    def set_comment(self, text):
        """Replace the line comment with one holding text."""
        self.field.comment = new_comment_group(text)

    def __repr__(self):
        return "<StructField {}>".format(self.name())


# =============================================================================
# STRUCT TAGS
# =============================================================================

go_escapes = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}


def unquote(literal):
    """Return the value of a Go string literal.

    Raises:
        TagSyntaxError: If literal is not a valid string literal

    """
    if len(literal) >= 2 and literal[0] == literal[-1] == "`":
        return literal[1:-1]
    if len(literal) < 2 or literal[0] != '"' or literal[-1] != '"':
        raise TagSyntaxError("bad syntax for struct tag value")

    body = literal[1:-1]
    chars = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == '"' or char == "\n":
            raise TagSyntaxError("bad syntax for struct tag value")
        if char != "\\":
            chars.append(char)
            i += 1
            continue
        escape = body[i + 1 : i + 2]
        if escape in go_escapes:
            chars.append(go_escapes[escape])
            i += 2
            continue
        widths = {"x": 2, "u": 4, "U": 8}
        try:
            if escape in widths:
                digits = body[i + 2 : i + 2 + widths[escape]]
                if len(digits) != widths[escape]:
                    raise ValueError(digits)
                chars.append(chr(int(digits, 16)))
                i += 2 + widths[escape]
            else:
                digits = body[i + 1 : i + 4]
                if len(digits) != 3:
                    raise ValueError(digits)
                chars.append(chr(int(digits, 8)))
                i += 4
        except ValueError:
            raise TagSyntaxError("bad syntax for struct tag value") from None
    return "".join(chars)


def quote(text):
    """Return text as a Go interpreted string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    escaped = escaped.replace("\n", "\\n").replace("\t", "\\t")
    return '"' + escaped + '"'


def _valid_key(key):
    return key != "" and all(
        char > " " and char not in ':"\x7f' for char in key
    )


class Tag:
    """For a single key:"name,option,..." entry of a struct tag."""

    def __init__(self, key, name, options=None):
        self.key = key
        self.name = name
        self.options = list(options) if options else []

    def value(self):
        """Return the value: the name followed by the options."""
        return ",".join([self.name] + self.options)

    def has_option(self, option):
        return option in self.options

    def __str__(self):
        return "{}:{}".format(self.key, quote(self.value()))

    def __repr__(self):
        return "<Tag {}>".format(self)


def parse_tags(text):
    """Parse the contents of a struct tag into a list of `Tag`s.

    Raises:
        TagSyntaxError: If text is not a space-separated list of key:"value"
            pairs

    """
    tags = []
    while True:
        text = text.lstrip(" ")
        if text == "":
            return tags

        i = 0
        while i < len(text) and text[i] > " " and text[i] not in ':"\x7f':
            i += 1
        if i == 0:
            raise TagSyntaxError("bad syntax for struct tag key")
        if i + 1 >= len(text) or text[i] != ":":
            raise TagSyntaxError("bad syntax for struct tag pair")
        if text[i + 1] != '"':
            raise TagSyntaxError("bad syntax for struct tag value")
        key = text[:i]
        text = text[i + 1 :]

        # Scan to the closing quote, skipping escapes
        i = 1
        while i < len(text) and text[i] != '"':
            if text[i] == "\\":
                i += 1
            i += 1
        if i >= len(text):
            raise TagSyntaxError("bad syntax for struct tag value")
        value = unquote(text[: i + 1])
        text = text[i + 1 :]

        parts = value.split(",")
        tags.append(Tag(key, parts[0], parts[1:]))


class StructTag:
    """For the tag of a struct field.

    The tag is parsed once; tags which cannot be parsed are treated as empty.
    Every edit sorts the tags by key and writes them back to the field.
    """

    def __init__(self, field):
        self.field = field
        self.tags_list = []
        try:
            self.reparse()
        except TagSyntaxError as err:
            logging.debug(
                "ignoring tag {} of field {}: {}".format(
                    field.tag.value, format_node(field.type), err
                )
            )

    def reparse(self):
        """Parse the field's tag again, discarding the current tags.

        Raises:
            TagSyntaxError: If the tag cannot be parsed; no tags are kept

        """
        self.tags_list = []
        if self.field.tag is None:
            return
        self.tags_list = parse_tags(unquote(self.field.tag.value))

    def _write_back(self):
        self.tags_list.sort(key=lambda tag: tag.key)
        value = str(self)
        if value == "":
            self.field.tag = None
            return
        literal = quote(value) if "`" in value else "`" + value + "`"
        if self.field.tag is None:
            self.field.tag = GoBasicLit("STRING", literal, NO_POS)
        else:
            self.field.tag.value = literal

    def get(self, key):
        """Return the tag with the key and whether it exists."""
        for tag in self.tags_list:
            if tag.key == key:
                return tag, True
        return None, False

    def set(self, key, value):
        """Set the tag for key to value, replacing any existing one.

        value is the full value, as in `set("json", "name,omitempty")`.

        Raises:
            TagSyntaxError: If key or value cannot be written in a tag; the
                tags are left unchanged

        """
        if not _valid_key(key):
            raise TagSyntaxError('invalid tag key "{}"'.format(key))
        if any(char < " " and char != "\t" for char in value):
            raise TagSyntaxError("invalid tag value {}".format(quote(value)))

        parts = value.split(",")
        new = Tag(key, parts[0], parts[1:])
        for i, tag in enumerate(self.tags_list):
            if tag.key == key:
                self.tags_list[i] = new
                break
        else:
            self.tags_list.append(new)
        self._write_back()

    def delete(self, *keys):
        """Delete the tags with the given keys."""
        self.tags_list = [tag for tag in self.tags_list if tag.key not in keys]
        self._write_back()

    def add_options(self, key, *options):
        """Add options to the tag for key, unless they are already there."""
        for tag in self.tags_list:
            if tag.key != key:
                continue
            for option in options:
                if not tag.has_option(option):
                    tag.options.append(option)
        self._write_back()

    def delete_options(self, key, *options):
        """Remove the given options from the tag for key."""
        for tag in self.tags_list:
            if tag.key == key:
                tag.options = [
                    option for option in tag.options if option not in options
                ]
        self._write_back()

    def keys(self):
        return [tag.key for tag in self.tags_list]

    def tags(self):
        return list(self.tags_list)

    def __str__(self):
        return " ".join(str(tag) for tag in self.tags_list)
