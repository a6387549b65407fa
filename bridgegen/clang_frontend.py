"""libclang front end: parses a C++ header into a DeclarationTree"""

import re
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from clang.cindex import (
    Config,
    CursorKind,
    Diagnostic,
    Index,
    TranslationUnit,
    TranslationUnitLoadError,
    TypeKind,
)

from .annotations import ANNOTATE
from .errors import FrontendError
from .options import normalize_path
from .types import (
    AliasDecl,
    AliasType,
    Attribute,
    ClassDecl,
    ClassType,
    DeclarationTree,
    Function,
    Namespace,
    Parameter,
    PointerType,
    PrimitiveKind,
    PrimitiveType,
    QualifiedType,
    ReferenceType,
    UnknownType,
)

PRIMITIVE_KINDS = {
    TypeKind.VOID: PrimitiveKind.VOID,
    TypeKind.BOOL: PrimitiveKind.BOOL,
    TypeKind.CHAR_S: PrimitiveKind.CHAR,
    TypeKind.CHAR_U: PrimitiveKind.CHAR,
    TypeKind.SCHAR: PrimitiveKind.SIGNED_CHAR,
    TypeKind.UCHAR: PrimitiveKind.UNSIGNED_CHAR,
    TypeKind.WCHAR: PrimitiveKind.WCHAR,
    TypeKind.CHAR16: PrimitiveKind.CHAR16,
    TypeKind.CHAR32: PrimitiveKind.CHAR32,
    TypeKind.SHORT: PrimitiveKind.SHORT,
    TypeKind.USHORT: PrimitiveKind.UNSIGNED_SHORT,
    TypeKind.INT: PrimitiveKind.INT,
    TypeKind.UINT: PrimitiveKind.UNSIGNED_INT,
    TypeKind.LONG: PrimitiveKind.LONG,
    TypeKind.ULONG: PrimitiveKind.UNSIGNED_LONG,
    TypeKind.LONGLONG: PrimitiveKind.LONG_LONG,
    TypeKind.ULONGLONG: PrimitiveKind.UNSIGNED_LONG_LONG,
    TypeKind.FLOAT: PrimitiveKind.FLOAT,
    TypeKind.DOUBLE: PrimitiveKind.DOUBLE,
    TypeKind.LONGDOUBLE: PrimitiveKind.LONG_DOUBLE,
}

CLASS_KINDS = (CursorKind.CLASS_DECL, CursorKind.STRUCT_DECL)
ALIAS_KINDS = (CursorKind.TYPEDEF_DECL, CursorKind.TYPE_ALIAS_DECL)
SCOPE_KINDS = (CursorKind.NAMESPACE, *CLASS_KINDS)
LEADING_QUALIFIERS = re.compile(r"^(?:(?:const|volatile)\s+)+")


def find_resource_dir(clang: str = "clang") -> Optional[str]:
    """Builtin header root of the clang on PATH (stddef.h and friends), None without one"""
    executable = shutil.which(clang)
    if executable is None:
        return None
    try:
        result = subprocess.run([executable, "-print-resource-dir"],
                                capture_output=True, text=True, check=True)
    except (OSError, subprocess.CalledProcessError):
        return None
    resource_dir = result.stdout.strip()
    if resource_dir and (Path(resource_dir) / "include").is_dir():
        return resource_dir
    return None


class ClangFrontend:
    """Parses headers with libclang.

    Declarations from files outside the parsed header and the include
    directories (system headers) are dropped from the tree. The libclang
    wheel ships no builtin headers, so headers that pull in the standard
    library need `resource_dir` (or equivalent `extra_args`) to parse.
    """

    def __init__(self, include_dirs: Sequence[str] = (), std: str = "c++20",
                 extra_args: Sequence[str] = (), library_file: Optional[str] = None,
                 resource_dir: Optional[str] = None):
        if library_file and not Config.loaded:
            Config.set_library_file(library_file)
        self.include_dirs = [normalize_path(Path(d).resolve()) for d in include_dirs]
        self.std = std
        self.extra_args = list(extra_args)
        self.resource_dir = resource_dir

    def compile_args(self) -> list[str]:
        args = ["-x", "c++", f"-std={self.std}"]
        if self.resource_dir:
            args.extend(["-resource-dir", self.resource_dir])
        args.extend(f"-I{d}" for d in self.include_dirs)
        args.extend(self.extra_args)
        return args

    def parse(self, path: Path) -> DeclarationTree:
        path = Path(path)
        try:
            tu = Index.create().parse(
                str(path),
                args=self.compile_args(),
                options=TranslationUnit.PARSE_SKIP_FUNCTION_BODIES,
            )
        except TranslationUnitLoadError as exc:
            raise FrontendError(f"libclang could not load '{path}': {exc}") from exc

        errors = tuple(
            self._format_diagnostic(d) for d in tu.diagnostics
            if d.severity >= Diagnostic.Error
        )
        visitor = _TreeVisitor(normalize_path(path), self.include_dirs)
        root = Namespace(name="", children=visitor.children(tu.cursor))
        return DeclarationTree(path=path, root=root, errors=errors)

    @staticmethod
    def _format_diagnostic(diagnostic) -> str:
        location = diagnostic.location
        if location.file:
            return f"{location.file.name}:{location.line}:{location.column}: {diagnostic.spelling}"
        return diagnostic.spelling


class _TreeVisitor:
    """Converts libclang cursors and types into declaration tree nodes"""

    def __init__(self, main_file: str, include_dirs: list[str]):
        self.main_file = main_file
        self.include_dirs = include_dirs

    def children(self, cursor, in_class: bool = False) -> tuple:
        decls = []
        for child in cursor.get_children():
            if not self._in_project(child):
                continue
            decl = self.convert_cursor(child, in_class)
            if decl is not None:
                decls.append(decl)
        return tuple(decls)

    def convert_cursor(self, cursor, in_class: bool):
        kind = cursor.kind
        if kind == CursorKind.NAMESPACE:
            return Namespace(
                name=cursor.spelling,
                children=self.children(cursor),
                key=cursor.get_usr(),
            )
        if kind in CLASS_KINDS:
            if not cursor.is_definition():
                return None
            return ClassDecl(
                name=cursor.spelling,
                children=self.children(cursor, in_class=True),
                attributes=self.attributes(cursor),
                key=cursor.get_usr(),
                source_file=self._file_of(cursor),
            )
        if kind in ALIAS_KINDS:
            return AliasDecl(
                name=cursor.spelling,
                key=cursor.get_usr(),
                source_file=self._file_of(cursor),
            )
        if in_class and kind == CursorKind.CXX_METHOD:
            return Function(
                name=cursor.spelling,
                parameters=tuple(
                    Parameter(name=arg.spelling, type=self.convert_type(arg.type))
                    for arg in cursor.get_arguments()
                ),
                return_type=self.convert_type(cursor.result_type),
                attributes=self.attributes(cursor),
                key=cursor.get_usr(),
            )
        if in_class and kind == CursorKind.FUNCTION_TEMPLATE:
            return Function(
                name=cursor.spelling,
                attributes=self.attributes(cursor),
                key=cursor.get_usr(),
                is_template=True,
            )
        return None

    @staticmethod
    def attributes(cursor) -> tuple[Attribute, ...]:
        return tuple(
            Attribute(kind=ANNOTATE, arguments=child.spelling)
            for child in cursor.get_children()
            if child.kind == CursorKind.ANNOTATE_ATTR
        )

    def convert_type(self, clang_type, unqualified: bool = False):
        if not unqualified and (clang_type.is_const_qualified() or clang_type.is_volatile_qualified()):
            return QualifiedType(
                element=self.convert_type(clang_type, unqualified=True),
                const=clang_type.is_const_qualified(),
                volatile=clang_type.is_volatile_qualified(),
            )

        kind = clang_type.kind
        if kind == TypeKind.POINTER:
            return PointerType(self.convert_type(clang_type.get_pointee()))
        if kind == TypeKind.LVALUEREFERENCE:
            return ReferenceType(self.convert_type(clang_type.get_pointee()))
        if kind == TypeKind.RVALUEREFERENCE:
            return ReferenceType(self.convert_type(clang_type.get_pointee()), rvalue=True)
        if kind == TypeKind.ELABORATED:
            return self.convert_type(clang_type.get_named_type(), unqualified=True)
        if kind == TypeKind.RECORD:
            decl = clang_type.get_declaration()
            if decl.spelling and clang_type.get_num_template_arguments() <= 0:
                return ClassType(name=decl.spelling, key=decl.get_usr(), spelling=self._qualified_spelling(decl))
        elif kind == TypeKind.TYPEDEF:
            decl = clang_type.get_declaration()
            return AliasType(name=decl.spelling, key=decl.get_usr(), spelling=self._qualified_spelling(decl))
        elif kind in PRIMITIVE_KINDS:
            return PrimitiveType(PRIMITIVE_KINDS[kind])

        return UnknownType(LEADING_QUALIFIERS.sub("", clang_type.spelling))

    def _in_project(self, cursor) -> bool:
        path = self._file_of(cursor)
        if path is None:
            return False
        if path == self.main_file:
            return True
        resolved = normalize_path(Path(path).resolve())
        return any(resolved.startswith(d + "/") for d in self.include_dirs)

    @staticmethod
    def _qualified_spelling(decl) -> str:
        names = [decl.spelling]
        parent = decl.semantic_parent
        while parent is not None and parent.kind in SCOPE_KINDS:
            if parent.spelling:
                names.append(parent.spelling)
            parent = parent.semantic_parent
        return "::".join(reversed(names))

    @staticmethod
    def _file_of(cursor) -> Optional[str]:
        location_file = cursor.location.file
        return normalize_path(location_file.name) if location_file else None
