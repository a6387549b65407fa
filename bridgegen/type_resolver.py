"""Renders type references into fully qualified C++ spellings"""

from typing import Optional

from .model import NamespacePath, join_path
from .namespace_resolver import NamespacePathResolver
from .types import (
    AliasType,
    ClassType,
    PointerType,
    PrimitiveType,
    QualifiedType,
    ReferenceType,
    TypeRef,
    UnknownType,
)


class TypeNameResolver:
    """Qualifies types against one declaration tree.

    `const Foo&` with Foo declared in A::B becomes `const A::B::Foo&`. A user
    type that cannot be located falls back to the front end's spelling (or its
    bare name without one) and unknown variants keep the front end's spelling,
    so qualify() never raises.
    """

    POINTER_SUFFIX = "*"
    REFERENCE_SUFFIX = "&"
    RVALUE_REFERENCE_SUFFIX = "&&"

    def __init__(self, namespaces: NamespacePathResolver):
        self.namespaces = namespaces

    def qualify(self, type_ref: TypeRef) -> str:
        if isinstance(type_ref, PointerType):
            return self.qualify(type_ref.element) + self.POINTER_SUFFIX
        if isinstance(type_ref, ReferenceType):
            suffix = self.RVALUE_REFERENCE_SUFFIX if type_ref.rvalue else self.REFERENCE_SUFFIX
            return self.qualify(type_ref.element) + suffix
        if isinstance(type_ref, QualifiedType):
            qualifiers = self._qualifiers(type_ref)
            base = self.qualify(type_ref.element)
            if not qualifiers:
                return base
            # cv on the pointer itself has to follow the star
            if isinstance(type_ref.element, PointerType):
                return f"{base} {qualifiers}"
            return f"{qualifiers} {base}"
        if isinstance(type_ref, (ClassType, AliasType)):
            path = self.namespaces.resolve_type_name(type_ref.name)
            if path:
                return join_path(path, type_ref.name)
            return type_ref.spelling or type_ref.name
        if isinstance(type_ref, PrimitiveType):
            return type_ref.kind.value
        if isinstance(type_ref, UnknownType):
            return type_ref.spelling
        return str(type_ref)

    def namespace_of(self, type_ref: TypeRef) -> Optional[NamespacePath]:
        """Namespace of the underlying user type; None for builtin and unknown types"""
        if isinstance(self.strip(type_ref), (ClassType, AliasType)):
            return self.namespaces.resolve_type_name(self.base_name(type_ref)) or ()
        return None

    @classmethod
    def base_name(cls, type_ref: TypeRef) -> str:
        """Name left after removing pointers, references and qualifiers"""
        base = cls.strip(type_ref)
        if isinstance(base, (ClassType, AliasType)):
            return base.name
        if isinstance(base, PrimitiveType):
            return base.kind.value
        if isinstance(base, UnknownType):
            return base.spelling
        return str(base)

    @classmethod
    def strip(cls, type_ref: TypeRef) -> TypeRef:
        while isinstance(type_ref, (PointerType, ReferenceType, QualifiedType)):
            type_ref = type_ref.element
        return type_ref

    @classmethod
    def _qualifiers(cls, type_ref: QualifiedType) -> str:
        words = []
        if type_ref.const:
            words.append("const")
        if type_ref.volatile:
            words.append("volatile")
        return " ".join(words)
