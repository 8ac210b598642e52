"""Classify, index and edit the declarations of Go packages."""
from .errors import (
    GoException,
    GoSyntaxError,
    GoTypeError,
    MethodError,
    TagSyntaxError,
)
from .facade import Facade
from .kinds import DeclKind, TypeKind, get_decl_kind, get_type_kind
from .loader import Config
from .package import PackageInfo
from .program import Program
from .type_node import (
    FieldInfo,
    FuncNode,
    StructField,
    StructTag,
    Tag,
    TypeNode,
    Variant,
)

__version__ = "0.1.0"
