"""Selection of classes and methods carrying the export markers"""

import re
from typing import Iterator, Optional

from .diagnostics import Diagnostics
from .options import GeneratorOptions
from .types import Attribute, ClassDecl, Container, Function, Namespace

ANNOTATE = "annotate"
OPERATOR_NAME = re.compile(r"^operator(?![A-Za-z0-9_])")


class AnnotationFilter:
    """Picks exported classes and their exported methods in declaration order"""

    def __init__(self, options: GeneratorOptions, diagnostics: Diagnostics):
        self.options = options
        self.diagnostics = diagnostics

    def select(self, root: Namespace, source_file: Optional[str] = None) -> list[tuple[ClassDecl, list[Function]]]:
        """Annotated namespace-level classes with their annotated methods.

        When `source_file` is given, classes declared in other files are left
        to the bridge of the header that declares them. Annotated classes
        nested in another class are skipped with a warning.
        """
        selected = []
        for cls, enclosing in self.iter_classes(root):
            if not self.is_exported_class(cls):
                continue
            if source_file and cls.source_file and cls.source_file != source_file:
                continue
            if enclosing is not None:
                self.diagnostics.warning(
                    f"Skipping {enclosing.name}::{cls.name}: nested classes are not supported")
                continue
            selected.append((cls, self.exported_methods(cls)))
        return selected

    def exported_methods(self, cls: ClassDecl) -> list[Function]:
        methods = []
        for method in cls.methods:
            if not self.is_exported_method(method):
                continue
            if reason := self._unsupported(method):
                self.diagnostics.warning(f"Skipping {cls.name}::{method.name}: {reason}")
                continue
            methods.append(method)
        return methods

    def is_exported_class(self, cls: ClassDecl) -> bool:
        return self._has_marker(cls.attributes, self.options.class_marker)

    def is_exported_method(self, method: Function) -> bool:
        return self._has_marker(method.attributes, self.options.method_marker)

    @classmethod
    def iter_classes(cls, container: Container,
                     enclosing: Optional[ClassDecl] = None) -> Iterator[tuple[ClassDecl, Optional[ClassDecl]]]:
        """Depth-first (class, innermost enclosing class or None) pairs"""
        for child in container.children:
            if isinstance(child, ClassDecl):
                yield child, enclosing
                yield from cls.iter_classes(child, child)
            elif isinstance(child, Namespace):
                yield from cls.iter_classes(child, enclosing)

    @staticmethod
    def _has_marker(attributes: tuple[Attribute, ...], marker: str) -> bool:
        return any(a.kind == ANNOTATE and a.arguments == marker for a in attributes)

    @staticmethod
    def _unsupported(method: Function) -> str:
        if OPERATOR_NAME.match(method.name):
            return "operator overloads are not supported"
        if method.is_template:
            return "template methods are not supported"
        return ""
