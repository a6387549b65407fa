"""Export model: what gets bridged, with resolved names and method IDs"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .types import Namespace

# Outer-to-inner namespace names; () is the global namespace
NamespacePath = tuple[str, ...]


def join_path(namespace: NamespacePath, name: str) -> str:
    return "::".join((*namespace, name))


@dataclass(frozen=True)
class ParameterExport:
    name: str
    type_spelling: str
    namespace: Optional[NamespacePath] = None


@dataclass(frozen=True)
class MethodExport:
    name: str
    method_id: int
    parameters: tuple[ParameterExport, ...] = ()
    return_spelling: str = "void"


@dataclass(frozen=True)
class ClassExport:
    name: str
    namespace: NamespacePath = ()
    methods: tuple[MethodExport, ...] = ()

    @property
    def qualified_name(self) -> str:
        return join_path(self.namespace, self.name)

    @property
    def handle_name(self) -> str:
        return f"{self.name}Handle"


@dataclass(frozen=True)
class TranslationUnit:
    """Exported classes of one header, in declaration order"""
    source_path: Path
    root: Namespace
    classes: tuple[ClassExport, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def has_exports(self) -> bool:
        return bool(self.classes)
