"""Syntax tree classes produced by the parser.

Nodes are mutable: the type node, struct field and tag wrappers keep
references to these objects and edit them in place, so a later render of the
tree observes every edit. Positions are integers from a `FileSet` and are
fixed when the node is parsed.
"""
from enum import IntFlag

from .positions import NO_POS


class ChanDir(IntFlag):
    """For the direction of a channel type."""

    SEND = 1
    RECV = 2
    BOTH = 3


class GoNode:
    """The base class to inherit syntax nodes from."""

    pos = NO_POS
    end = NO_POS

    def children(self):
        """Return the child nodes in source order."""
        return []

    def __repr__(self):
        return "<{} {}-{}>".format(type(self).__name__, self.pos, self.end)


def _end_of(*nodes):
    for node in reversed(nodes):
        if node is not None and node.end != NO_POS:
            return node.end
    return NO_POS


# =============================================================================
# COMMENTS
# =============================================================================


class GoComment(GoNode):
    """For a single // or /* */ comment."""

    def __init__(self, text, pos=NO_POS):
        self.text = text
        self.pos = pos
        self.end = pos + len(text) if pos != NO_POS else NO_POS


class GoCommentGroup(GoNode):
    """For a sequence of comments with no other tokens between them."""

    def __init__(self, comments):
        self.list = comments

    @property
    def pos(self):
        return self.list[0].pos

    @property
    def end(self):
        return self.list[-1].end

    def text(self):
        """Return the text of the comments without comment markers.

        Trailing spaces are removed, runs of empty lines are reduced to one
        and leading/trailing empty lines are dropped. A non-empty result ends
        with a newline.
        """
        lines = []
        for comment in self.list:
            text = comment.text
            if text.startswith("//"):
                text = text[2:]
                if text.startswith(" "):
                    text = text[1:]
                lines.append(text)
            elif text.startswith("/*"):
                lines.extend(text[2:-2].split("\n"))
            else:  # Synthesized comments may be plain text
                lines.extend(text.split("\n"))

        cleaned = []
        for line in lines:
            line = line.rstrip()
            if line == "" and (not cleaned or cleaned[-1] == ""):
                continue
            cleaned.append(line)
        while cleaned and cleaned[-1] == "":
            cleaned.pop()
        if not cleaned:
            return ""
        return "\n".join(cleaned) + "\n"


def new_comment_group(text):
    """Synthesize a comment group from text.

    Text without comment markers is turned into // line comments.
    """
    if text.startswith("//") or text.startswith("/*"):
        return GoCommentGroup([GoComment(text)])
    return GoCommentGroup(
        [
            GoComment("//" if line == "" else "// " + line)
            for line in text.rstrip("\n").split("\n")
        ]
    )


# =============================================================================
# EXPRESSIONS AND TYPES
# =============================================================================


class GoIdent(GoNode):
    """For identifiers."""

    def __init__(self, name, pos=NO_POS):
        self.name = name
        self.pos = pos
        self.end = pos + len(name) if pos != NO_POS else NO_POS

    def __str__(self):
        return self.name

    def __repr__(self):
        return "<GoIdent {} {}>".format(self.name, self.pos)


class GoBasicLit(GoNode):
    """For literals like integers, strings and so on."""

    def __init__(self, kind, value, pos=NO_POS):
        self.kind = kind  # One of INT, FLOAT, IMAG, RUNE, STRING
        self.value = value
        self.pos = pos
        self.end = pos + len(value) if pos != NO_POS else NO_POS


class GoRawExpr(GoNode):
    """For expressions kept as a run of tokens.

    Tokens are (type, value) pairs; text is the source text they span.
    """

    def __init__(self, tokens, text, pos, end):
        self.tokens = tokens
        self.text = text
        self.pos = pos
        self.end = end


class GoSelectorExpr(GoNode):
    """For qualified identifiers like "pkg.Name"."""

    def __init__(self, x, sel):
        self.x = x
        self.sel = sel

    @property
    def pos(self):
        return self.x.pos

    @property
    def end(self):
        return self.sel.end

    def children(self):
        return [self.x, self.sel]


class GoStarExpr(GoNode):
    """For pointer types."""

    def __init__(self, star, x):
        self.pos = star
        self.x = x

    @property
    def end(self):
        return self.x.end

    def children(self):
        return [self.x]


class GoEllipsis(GoNode):
    """For the type of a variadic parameter."""

    def __init__(self, ellipsis, elt):
        self.pos = ellipsis
        self.elt = elt

    @property
    def end(self):
        return self.elt.end

    def children(self):
        return [self.elt]


class GoArrayType(GoNode):
    """For array and slice types; len is None for slices."""

    def __init__(self, lbrack, length, elt):
        self.pos = lbrack
        self.len = length
        self.elt = elt

    @property
    def end(self):
        return self.elt.end

    def children(self):
        return [child for child in (self.len, self.elt) if child is not None]


class GoMapType(GoNode):
    """For map types."""

    def __init__(self, map_pos, key, value):
        self.pos = map_pos
        self.key = key
        self.value = value

    @property
    def end(self):
        return self.value.end

    def children(self):
        return [self.key, self.value]


class GoChanType(GoNode):
    """For channel types."""

    def __init__(self, begin, direction, value):
        self.pos = begin
        self.dir = direction
        self.value = value

    @property
    def end(self):
        return self.value.end

    def children(self):
        return [self.value]


class GoField(GoNode):
    """For a field in a struct, a parameter, a result or an interface method.

    Names is empty for anonymous fields and unnamed parameters.
    """

    def __init__(self, names, dtype, tag=None, doc=None, comment=None):
        self.doc = doc
        self.names = names
        self.type = dtype
        self.tag = tag
        self.comment = comment

    @property
    def pos(self):
        if self.names:
            return self.names[0].pos
        return self.type.pos

    @property
    def end(self):
        return _end_of(self.type, self.tag)

    def children(self):
        nodes = list(self.names) + [self.type]
        if self.tag is not None:
            nodes.append(self.tag)
        return nodes


class GoFieldList(GoNode):
    """For a list of fields enclosed by parentheses or braces."""

    def __init__(self, opening, fields, closing):
        self.opening = opening
        self.list = fields
        self.closing = closing

    @property
    def pos(self):
        if self.opening != NO_POS:
            return self.opening
        if self.list:
            return self.list[0].pos
        return NO_POS

    @property
    def end(self):
        if self.closing != NO_POS:
            return self.closing + 1
        if self.list:
            return self.list[-1].end
        return NO_POS

    def num_fields(self):
        """Return the number of declared names (anonymous fields count 1)."""
        return sum(max(len(field.names), 1) for field in self.list)

    def children(self):
        return list(self.list)


class GoFuncType(GoNode):
    """For function signatures; results is None when nothing is returned."""

    def __init__(self, func_pos, params, results=None):
        self.func_pos = func_pos
        self.params = params
        self.results = results

    @property
    def pos(self):
        if self.func_pos != NO_POS:
            return self.func_pos
        return self.params.pos

    @property
    def end(self):
        return _end_of(self.params, self.results)

    def children(self):
        nodes = [self.params]
        if self.results is not None:
            nodes.append(self.results)
        return nodes


class GoStructType(GoNode):
    """For struct types."""

    def __init__(self, struct_pos, fields):
        self.pos = struct_pos
        self.fields = fields

    @property
    def end(self):
        return self.fields.end

    def children(self):
        return [self.fields]


class GoInterfaceType(GoNode):
    """For interface types.

    Each method is a field with one name and a `GoFuncType`; an embedded
    interface is a field without names.
    """

    def __init__(self, interface_pos, methods):
        self.pos = interface_pos
        self.methods = methods

    @property
    def end(self):
        return self.methods.end

    def children(self):
        return [self.methods]


# =============================================================================
# DECLARATIONS AND SCOPE
# =============================================================================


class GoImportSpec(GoNode):
    """For an import specification."""

    def __init__(self, name, path, doc=None, comment=None):
        self.doc = doc
        self.name = name  # None, or an identifier (possibly "." or "_")
        self.path = path
        self.comment = comment

    @property
    def pos(self):
        if self.name is not None:
            return self.name.pos
        return self.path.pos

    @property
    def end(self):
        return self.path.end

    def import_path(self):
        return self.path.value[1:-1]

    def children(self):
        if self.name is None:
            return [self.path]
        return [self.name, self.path]


class GoValueSpec(GoNode):
    """For a single spec of a const or var declaration."""

    def __init__(self, names, dtype=None, values=None, doc=None, comment=None):
        self.doc = doc
        self.names = names
        self.type = dtype
        self.values = values if values is not None else []
        self.comment = comment

    @property
    def pos(self):
        return self.names[0].pos

    @property
    def end(self):
        if self.values:
            return self.values[-1].end
        if self.type is not None:
            return self.type.end
        return self.names[-1].end

    def children(self):
        nodes = list(self.names)
        if self.type is not None:
            nodes.append(self.type)
        return nodes + list(self.values)


class GoTypeSpec(GoNode):
    """For typedefs and aliases; assign is NO_POS unless "=" was used."""

    def __init__(self, name, dtype, assign=NO_POS, doc=None, comment=None):
        self.doc = doc
        self.name = name
        self.assign = assign
        self.type = dtype
        self.comment = comment

    @property
    def pos(self):
        return self.name.pos

    @property
    def end(self):
        return self.type.end

    def children(self):
        return [self.name, self.type]


class GoGenDecl(GoNode):
    """For import, const, type and var declarations.

    tok is one of "import", "const", "type" and "var"; lparen and rparen are
    NO_POS for a declaration with a single unparenthesized spec.
    """

    def __init__(self, tok, tok_pos, specs, lparen=NO_POS, rparen=NO_POS):
        self.doc = None
        self.tok = tok
        self.pos = tok_pos
        self.lparen = lparen
        self.specs = specs
        self.rparen = rparen

    @property
    def end(self):
        if self.rparen != NO_POS:
            return self.rparen + 1
        return self.specs[0].end

    def children(self):
        return list(self.specs)


class GoFuncDecl(GoNode):
    """For function and method declarations; recv is None for functions."""

    def __init__(self, recv, name, dtype, body=None):
        self.doc = None
        self.recv = recv
        self.name = name
        self.type = dtype
        self.body = body

    @property
    def pos(self):
        return self.type.pos

    @property
    def end(self):
        return _end_of(self.type, self.body)

    def children(self):
        nodes = []
        if self.recv is not None:
            nodes.append(self.recv)
        nodes += [self.name, self.type]
        if self.body is not None:
            nodes.append(self.body)
        return nodes


# =============================================================================
# STATEMENTS
# =============================================================================


class GoBlockStmt(GoNode):
    """For a function body; text is its source, braces included."""

    def __init__(self, lbrace, stmts, rbrace, text):
        self.pos = lbrace
        self.list = stmts
        self.rbrace = rbrace
        self.text = text

    @property
    def end(self):
        return self.rbrace + 1

    def children(self):
        return list(self.list)


class GoAssignStmt(GoNode):
    """For assignment statements, including short declarations (":=")."""

    def __init__(self, lhs, tok, tok_pos, rhs):
        self.lhs = lhs
        self.tok = tok
        self.tok_pos = tok_pos
        self.rhs = rhs

    @property
    def pos(self):
        return self.lhs[0].pos

    @property
    def end(self):
        if self.rhs:
            return self.rhs[-1].end
        return self.tok_pos + len(self.tok)

    def children(self):
        return list(self.lhs) + list(self.rhs)


class GoRawStmt(GoNode):
    """For any other statement, kept as a run of tokens."""

    def __init__(self, tokens, text, pos, end):
        self.tokens = tokens
        self.text = text
        self.pos = pos
        self.end = end


# =============================================================================
# PACKAGES
# =============================================================================


class GoFile(GoNode):
    """For the source file."""

    def __init__(self, package_pos, name, decls, end=NO_POS):
        self.doc = None
        self.pos = package_pos
        self.name = name
        self.decls = decls
        self.end = end
        self.filename = ""
        self.comments = []  # All comment groups of the file

        self.imports = []
        for decl in decls:
            if isinstance(decl, GoGenDecl) and decl.tok == "import":
                self.imports.extend(decl.specs)

    def children(self):
        return [self.name] + list(self.decls)


# =============================================================================
# TRAVERSAL
# =============================================================================


def inspect(node, fn):
    """Traverse the tree in depth-first order.

    fn is called with each node; its children are visited only if it returns
    true.
    """
    if not fn(node):
        return
    for child in node.children():
        inspect(child, fn)


def path_enclosing_interval(root, start, end):
    """Return the path to the deepest node enclosing [start, end).

    Args:
        root (`GoNode`): The root to search from (usually a `GoFile`)
        start (int): The first position of the interval
        end (int): The position just past the interval

    Returns:
        tuple: The list of nodes from the innermost node up to root, and
            whether the innermost node spans the interval exactly. The list
            is empty if root does not contain the interval.

    """
    if not (root.pos <= start and end <= root.end):
        return [], False

    path = []
    node = root
    while node is not None:
        path.append(node)
        enclosing = None
        for child in node.children():
            if (
                child.pos != NO_POS
                and child.pos <= start
                and end <= child.end
            ):
                enclosing = child
                break
        node = enclosing

    path.reverse()
    exact = path[0].pos == start and path[0].end == end
    return path, exact


def base_ident(expr):
    """Return the identifier naming the base type of expr, or None.

    One level of pointer indirection is removed and a qualified name yields
    its selected identifier.
    """
    if isinstance(expr, GoStarExpr):
        expr = expr.x
    if isinstance(expr, GoIdent):
        return expr
    if isinstance(expr, GoSelectorExpr):
        return expr.sel
    return None


def receiver_base(expr):
    """Return the identifier of a receiver type, stripping all "*"s."""
    while isinstance(expr, GoStarExpr):
        expr = expr.x
    if isinstance(expr, GoIdent):
        return expr
    return None
