"""Bridge Generator - emits extern "C" handle and dispatch wrappers for exported classes"""

from typing import Union

from .model import ClassExport, MethodExport, TranslationUnit
from .options import GeneratorOptions


class BridgeEmitter:
    """Generates the bridge header text for a TranslationUnit.

    Output is a pure function of the model and the timestamp string, so two
    runs over the same input differ only in the GENERATION DATE line.
    """

    INDENT = "    "

    def __init__(self, options: GeneratorOptions):
        self.options = options

    def emit(self, item: Union[ClassExport, TranslationUnit], generated_at: str = "") -> str:
        if isinstance(item, TranslationUnit):
            return self.generate(item, generated_at)
        return "\n".join(self.generate_class(item)) + "\n"

    def generate(self, unit: TranslationUnit, generated_at: str) -> str:
        lines = self._file_preamble(unit, generated_at)
        lines.append('extern "C" {')
        for cls in unit.classes:
            lines.extend(self.generate_class(cls))
        lines.extend(self._file_postamble())
        return "\n".join(lines) + "\n"

    def _file_preamble(self, unit: TranslationUnit, generated_at: str) -> list[str]:
        return [
            "// THIS IS GENERATED CODE DO NOT EDIT DIRECTLY",
            f"// FILE USED FOR GENERATION: {self.options.display_path(unit.source_path)}",
            f"// GENERATION DATE: {generated_at}",
            "// clang-format off",
            "// NOLINTBEGIN",
            "#pragma once",
            "",
            f'#include "{self.options.include_path(unit.source_path)}"',
            "#include <cstdint>",
            "#include <tuple>",
            "#include <utility>",
            "",
        ]

    def _file_postamble(self) -> list[str]:
        return [
            '} // extern "C"',
            "// NOLINTEND",
            "// clang-format on",
        ]

    def generate_class(self, cls: ClassExport) -> list[str]:
        lines = [f"namespace {ns} {{" for ns in cls.namespace]
        lines.extend(self._handle_decl(cls))
        lines.extend(self._dispatch_impl(cls))
        lines.extend(f"}} // namespace {ns}" for ns in reversed(cls.namespace))
        return lines

    def _handle_decl(self, cls: ClassExport) -> list[str]:
        h = cls.handle_name
        return [
            f"typedef void* {h};",
            f"inline {h} {cls.name}_Create() {{ return reinterpret_cast<{h}>(new {cls.name}()); }}",
            f"inline void {cls.name}_Destroy({h} handle) {{ delete reinterpret_cast<{cls.name}*>(handle); }}",
        ]

    def _dispatch_impl(self, cls: ClassExport) -> list[str]:
        i = self.INDENT
        lines = [f"inline void {cls.name}_Call({cls.handle_name} handle, uint32_t methodID, void* param) {{"]
        if cls.methods:
            lines.append(f"{i}auto* instance = reinterpret_cast<{cls.name}*>(handle);")
        lines.append(f"{i}switch (methodID) {{")
        for method in cls.methods:
            lines.extend(self._dispatch_case(method))
        # Unknown IDs are ignored
        lines.append(f"{i * 2}default:")
        lines.append(f"{i * 3}break;")
        lines.append(f"{i}}}")
        lines.append("}")
        return lines

    def _dispatch_case(self, method: MethodExport) -> list[str]:
        i = self.INDENT
        if not method.parameters:
            return [
                f"{i * 2}case {method.method_id}:",
                f"{i * 3}instance->{method.name}();",
                f"{i * 3}break;",
            ]

        args_type = f"ArgsType_{method.name}_{method.method_id}"
        args_var = f"args_{method.name}_{method.method_id}"
        element_types = ", ".join(p.type_spelling for p in method.parameters)
        return [
            f"{i * 2}case {method.method_id}: {{",
            f"{i * 3}using {args_type} = std::tuple<{element_types}>;",
            f"{i * 3}auto* {args_var} = reinterpret_cast<{args_type}*>(param);",
            f"{i * 3}std::apply([&](auto&&... args) {{ instance->{method.name}"
            f"(std::forward<decltype(args)>(args)...); }}, *{args_var});",
            f"{i * 3}break;",
            f"{i * 2}}}",
        ]
