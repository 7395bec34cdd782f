"""Type descriptors and their resolution from annotations and docstrings."""

from .context import (
    AliasDeclaration,
    InterfaceDeclaration,
    OpaqueDeclaration,
    ResolutionContext,
    build_context,
)
from .docstrings import extract_doc_types, function_doc_types, parse_type_text
from .models import (
    BOOLEAN,
    NONE,
    NUMBER,
    STRING,
    UNKNOWN,
    Array,
    Constant,
    Dictionary,
    FixedTuple,
    NoneValue,
    Object,
    Primitive,
    PrimitiveKind,
    Reference,
    TypeDescriptor,
    Union,
    Unknown,
    contains_reference,
    format_descriptor,
    make_union,
)
from .resolver import TypeResolver

__all__ = [
    "BOOLEAN",
    "NONE",
    "NUMBER",
    "STRING",
    "UNKNOWN",
    "AliasDeclaration",
    "Array",
    "Constant",
    "Dictionary",
    "FixedTuple",
    "InterfaceDeclaration",
    "NoneValue",
    "Object",
    "OpaqueDeclaration",
    "Primitive",
    "PrimitiveKind",
    "Reference",
    "ResolutionContext",
    "TypeDescriptor",
    "TypeResolver",
    "Union",
    "Unknown",
    "build_context",
    "contains_reference",
    "extract_doc_types",
    "format_descriptor",
    "function_doc_types",
    "parse_type_text",
]
