"""
C++ Bridge Generator Package

Reads C++ headers whose classes and methods carry export annotations and
generates, per header, extern "C" wrappers exposing each class through:
  1. An opaque handle typedef
  2. Create / destroy thunks
  3. A dispatch function selecting the method by numeric ID
"""

from .types import (
    AliasDecl, AliasType, Attribute, ClassDecl, ClassType, DeclarationTree, Function,
    Namespace, Parameter, PointerType, PrimitiveKind, PrimitiveType, QualifiedType,
    ReferenceType, UnknownType,
)
from .model import ClassExport, MethodExport, NamespacePath, ParameterExport, TranslationUnit
from .options import GeneratorOptions
from .diagnostics import Diagnostic, Diagnostics, Severity
from .errors import BridgeGenerationError, FrontendError
from .namespace_resolver import NamespacePathResolver
from .type_resolver import TypeNameResolver
from .annotations import AnnotationFilter
from .model_builder import BridgeModelBuilder
from .bridge_generator import BridgeEmitter
from .orchestrator import GenerationOrchestrator, GenerationResult

__all__ = [
    'AliasDecl', 'AliasType', 'Attribute', 'ClassDecl', 'ClassType', 'DeclarationTree',
    'Function', 'Namespace', 'Parameter', 'PointerType', 'PrimitiveKind', 'PrimitiveType',
    'QualifiedType', 'ReferenceType', 'UnknownType',
    'ClassExport', 'MethodExport', 'NamespacePath', 'ParameterExport', 'TranslationUnit',
    'GeneratorOptions', 'Diagnostic', 'Diagnostics', 'Severity',
    'BridgeGenerationError', 'FrontendError',
    'NamespacePathResolver', 'TypeNameResolver', 'AnnotationFilter',
    'BridgeModelBuilder', 'BridgeEmitter', 'GenerationOrchestrator', 'GenerationResult',
]
