"""Namespace path resolution by depth-first walk of the declaration tree"""

from typing import Callable, Optional

from .diagnostics import Diagnostics
from .model import NamespacePath
from .types import AliasDecl, ClassDecl, Container, Decl, Namespace

Matcher = Callable[[Decl], bool]


class NamespacePathResolver:
    """Finds the chain of namespaces enclosing a declaration.

    The walk keeps a namespace stack: a name is pushed when the walk enters a
    namespace and popped when it leaves, so the stack at the point of a match
    is exactly the lexical nesting, outer to inner. Class scopes are searched
    but never pushed. Anonymous namespaces are entered without adding a name.

    Lookup by type name returns the first depth-first match. Two types with
    the same name in different namespaces are not told apart.
    """

    def __init__(self, root: Namespace, diagnostics: Diagnostics):
        self.root = root
        self.diagnostics = diagnostics
        self._type_paths: dict[str, Optional[NamespacePath]] = {}

    def resolve(self, target: Decl) -> NamespacePath:
        """Namespace path of a declaration, matched by kind and declaration key"""
        kind = type(target)
        key = target.key

        def matches(node: Decl) -> bool:
            if key:
                return type(node) is kind and node.key == key
            return node == target

        path = self._find(matches)
        if path is None:
            self.diagnostics.warning(f"{target.name} not found in the declaration tree")
            return ()
        return path

    def resolve_type_name(self, name: str) -> Optional[NamespacePath]:
        """Namespace path of the first class or alias declared as `name`"""
        if name in self._type_paths:
            return self._type_paths[name]

        def matches(node: Decl) -> bool:
            return isinstance(node, (ClassDecl, AliasDecl)) and node.name == name

        path = self._find(matches)
        if path is None:
            self.diagnostics.warning(f"Type {name} not found in the declaration tree")
        else:
            self.diagnostics.debug(f"Found type {name} in namespace path: {'::'.join(path)}")
        self._type_paths[name] = path
        return path

    def _find(self, matches: Matcher) -> Optional[NamespacePath]:
        stack: list[str] = []
        if self._walk(self.root, matches, stack):
            return tuple(stack)
        return None

    def _walk(self, container: Container, matches: Matcher, stack: list[str]) -> bool:
        for child in container.children:
            if isinstance(child, Namespace):
                if child.name:
                    stack.append(child.name)
                found = self._walk(child, matches, stack)
                if found:
                    return True
                if child.name:
                    stack.pop()
            elif matches(child):
                return True
            elif isinstance(child, ClassDecl):
                if self._walk(child, matches, stack):
                    return True
        return False
