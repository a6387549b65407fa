"""Builds the export model for one parsed header"""

from .annotations import AnnotationFilter
from .diagnostics import Diagnostics
from .model import ClassExport, MethodExport, ParameterExport, TranslationUnit
from .namespace_resolver import NamespacePathResolver
from .options import GeneratorOptions, normalize_path
from .type_resolver import TypeNameResolver
from .types import ClassDecl, DeclarationTree, Function, Parameter


class BridgeModelBuilder:
    """Turns a declaration tree into an immutable TranslationUnit.

    A tree carrying front-end errors yields a unit without classes. Names
    that cannot be resolved degrade to their bare spelling instead of
    dropping the class.
    """

    def __init__(self, options: GeneratorOptions, diagnostics: Diagnostics):
        self.options = options
        self.diagnostics = diagnostics
        self.annotations = AnnotationFilter(options, diagnostics)

    def build(self, tree: DeclarationTree) -> TranslationUnit:
        source = str(tree.path)
        if tree.has_errors:
            for message in tree.errors:
                self.diagnostics.error(message, source)
            return TranslationUnit(source_path=tree.path, root=tree.root, errors=tree.errors)

        namespaces = NamespacePathResolver(tree.root, self.diagnostics)
        types = TypeNameResolver(namespaces)

        classes = []
        for cls, methods in self.annotations.select(tree.root, normalize_path(tree.path)):
            classes.append(self._build_class(cls, methods, namespaces, types))
            self.diagnostics.debug(f"Exporting {cls.name} with {len(methods)} method(s)", source)

        return TranslationUnit(source_path=tree.path, root=tree.root, classes=tuple(classes))

    def _build_class(self, cls: ClassDecl, methods: list[Function],
                     namespaces: NamespacePathResolver, types: TypeNameResolver) -> ClassExport:
        return ClassExport(
            name=cls.name,
            namespace=namespaces.resolve(cls),
            methods=tuple(
                self._build_method(method, method_id, types)
                for method_id, method in enumerate(methods)
            ),
        )

    def _build_method(self, method: Function, method_id: int, types: TypeNameResolver) -> MethodExport:
        return MethodExport(
            name=method.name,
            method_id=method_id,
            parameters=tuple(
                self._build_parameter(param, index, types)
                for index, param in enumerate(method.parameters)
            ),
            return_spelling=types.qualify(method.return_type),
        )

    def _build_parameter(self, param: Parameter, index: int, types: TypeNameResolver) -> ParameterExport:
        return ParameterExport(
            name=param.name or f"arg{index}",
            type_spelling=types.qualify(param.type),
            namespace=types.namespace_of(param.type),
        )
