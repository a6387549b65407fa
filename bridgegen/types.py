"""Declaration tree types produced by a front end and consumed by the generator"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union


class PrimitiveKind(Enum):
    """Builtin types, valued by their canonical C++ spelling"""
    VOID = "void"
    BOOL = "bool"
    CHAR = "char"
    SIGNED_CHAR = "signed char"
    UNSIGNED_CHAR = "unsigned char"
    WCHAR = "wchar_t"
    CHAR16 = "char16_t"
    CHAR32 = "char32_t"
    SHORT = "short"
    UNSIGNED_SHORT = "unsigned short"
    INT = "int"
    UNSIGNED_INT = "unsigned int"
    LONG = "long"
    UNSIGNED_LONG = "unsigned long"
    LONG_LONG = "long long"
    UNSIGNED_LONG_LONG = "unsigned long long"
    FLOAT = "float"
    DOUBLE = "double"
    LONG_DOUBLE = "long double"


# Type references

@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind


@dataclass(frozen=True)
class PointerType:
    element: "TypeRef"


@dataclass(frozen=True)
class ReferenceType:
    element: "TypeRef"
    rvalue: bool = False


@dataclass(frozen=True)
class QualifiedType:
    """const/volatile wrapper around another type"""
    element: "TypeRef"
    const: bool = False
    volatile: bool = False


@dataclass(frozen=True)
class ClassType:
    """Reference to a user-defined class or struct.

    `spelling` is the front end's own text for the type (e.g. `geo::Point`),
    used when the name cannot be located in the declaration tree.
    """
    name: str
    key: str = ""
    spelling: str = ""


@dataclass(frozen=True)
class AliasType:
    """Reference to a typedef or using-alias; `spelling` as for ClassType"""
    name: str
    key: str = ""
    spelling: str = ""


@dataclass(frozen=True)
class UnknownType:
    """Any type the front end has no variant for; keeps its native spelling"""
    spelling: str


TypeRef = Union[PrimitiveType, PointerType, ReferenceType, QualifiedType,
                ClassType, AliasType, UnknownType]


# Declarations

@dataclass(frozen=True)
class Attribute:
    kind: str
    arguments: str = ""


@dataclass(frozen=True)
class Parameter:
    name: str
    type: TypeRef


@dataclass(frozen=True)
class Function:
    """Member function declaration"""
    name: str
    parameters: tuple[Parameter, ...] = ()
    return_type: TypeRef = PrimitiveType(PrimitiveKind.VOID)
    attributes: tuple[Attribute, ...] = ()
    key: str = ""
    is_template: bool = False


@dataclass(frozen=True)
class AliasDecl:
    name: str
    key: str = ""
    source_file: Optional[str] = None


@dataclass(frozen=True)
class ClassDecl:
    """Class or struct definition; children hold methods, nested types and aliases"""
    name: str
    children: tuple["Decl", ...] = ()
    attributes: tuple[Attribute, ...] = ()
    key: str = ""
    source_file: Optional[str] = None

    @property
    def methods(self) -> list[Function]:
        return [c for c in self.children if isinstance(c, Function)]


@dataclass(frozen=True)
class Namespace:
    """Namespace scope; the translation unit root is a nameless Namespace"""
    name: str
    children: tuple["Decl", ...] = ()
    key: str = ""


Decl = Union[Namespace, ClassDecl, Function, AliasDecl]
Container = Union[Namespace, ClassDecl]


@dataclass(frozen=True)
class DeclarationTree:
    """One parsed header as handed over by the front end"""
    path: Path
    root: Namespace
    errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
