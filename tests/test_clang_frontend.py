from __future__ import annotations

import contextlib
import io
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import tree_builders  # noqa: F401

from bridgegen.clang_frontend import ClangFrontend, find_resource_dir
from bridgegen.cli import build_parser, main
from bridgegen.diagnostics import Diagnostics
from bridgegen.model import ClassExport, MethodExport, ParameterExport
from bridgegen.model_builder import BridgeModelBuilder
from bridgegen.options import GeneratorOptions
from bridgegen.types import ClassDecl, Namespace

SHAPE_HEADER = """\
#pragma once
#define BRIDGE_CLASS __attribute__((annotate("bridge_class")))
#define BRIDGE_FUNC __attribute__((annotate("bridge_func")))

namespace geo {
struct Point {
    int x;
    int y;
};

namespace shapes {
class BRIDGE_CLASS Shape {
public:
    BRIDGE_FUNC void reset();
    BRIDGE_FUNC void move(const Point& to, float* scale);
    void hidden();
};
}  // namespace shapes
}  // namespace geo

class BRIDGE_CLASS Registry {
public:
    BRIDGE_FUNC void clear();
};
"""

SIZED_HEADER = """\
#pragma once
#include <stddef.h>
#define BRIDGE_CLASS __attribute__((annotate("bridge_class")))
#define BRIDGE_FUNC __attribute__((annotate("bridge_func")))

class BRIDGE_CLASS Buffer {
public:
    BRIDGE_FUNC void reserve(size_t count);
};
"""

LOOKUP_HEADER = """\
#pragma once
#include "ids.h"
#define BRIDGE_CLASS __attribute__((annotate("bridge_class")))
#define BRIDGE_FUNC __attribute__((annotate("bridge_func")))

class BRIDGE_CLASS Directory {
public:
    BRIDGE_FUNC void forget(const vendor::Id& id);
};
"""

BROKEN_HEADER = """\
class Broken {
    undeclared_type member;
};
"""


class ClangFrontendTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.workspace = Path(self._tmp.name)
        self.include_dir = self.workspace / "include"
        self.diagnostics = Diagnostics()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write_header(self, relative: str, content: str) -> Path:
        path = self.include_dir / "impact" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def frontend(self) -> ClangFrontend:
        return ClangFrontend([str(self.include_dir)])

    def test_builds_declaration_tree_with_annotations(self) -> None:
        header = self.write_header("shapes/shape.h", SHAPE_HEADER)
        tree = self.frontend().parse(header)

        self.assertEqual(tree.errors, ())
        geo = next(d for d in tree.root.children if isinstance(d, Namespace) and d.name == "geo")
        shapes = next(d for d in geo.children if isinstance(d, Namespace))
        shape = next(d for d in shapes.children if isinstance(d, ClassDecl))
        self.assertEqual(shape.name, "Shape")
        self.assertEqual([a.arguments for a in shape.attributes], ["bridge_class"])
        self.assertEqual([m.name for m in shape.methods], ["reset", "move", "hidden"])
        self.assertTrue(shape.key)

    def test_model_from_parsed_header(self) -> None:
        header = self.write_header("shapes/shape.h", SHAPE_HEADER)
        tree = self.frontend().parse(header)

        unit = BridgeModelBuilder(GeneratorOptions(), self.diagnostics).build(tree)

        self.assertEqual(unit.classes, (
            ClassExport(
                name="Shape",
                namespace=("geo", "shapes"),
                methods=(
                    MethodExport(name="reset", method_id=0),
                    MethodExport(name="move", method_id=1, parameters=(
                        ParameterExport(name="to", type_spelling="const geo::Point&", namespace=("geo",)),
                        ParameterExport(name="scale", type_spelling="float*", namespace=None),
                    )),
                ),
            ),
            ClassExport(name="Registry", methods=(MethodExport(name="clear", method_id=0),)),
        ))

    def test_parse_errors_are_reported_on_the_tree(self) -> None:
        header = self.write_header("broken.h", BROKEN_HEADER)
        tree = self.frontend().parse(header)

        self.assertTrue(tree.has_errors)
        self.assertTrue(any("undeclared_type" in message for message in tree.errors))

    def test_types_outside_the_project_keep_clang_spelling(self) -> None:
        vendor = self.workspace / "vendor"
        vendor.mkdir()
        (vendor / "ids.h").write_text("#pragma once\nnamespace vendor { typedef int Id; }\n", encoding="utf-8")
        header = self.write_header("lookup.h", LOOKUP_HEADER)
        frontend = ClangFrontend([str(self.include_dir)], extra_args=[f"-I{vendor}"])

        tree = frontend.parse(header)
        unit = BridgeModelBuilder(GeneratorOptions(), self.diagnostics).build(tree)

        self.assertEqual(tree.errors, ())
        self.assertEqual(unit.classes[0].methods[0].parameters[0].type_spelling, "const vendor::Id&")

    @unittest.skipUnless(find_resource_dir(), "no clang executable to locate builtin headers")
    def test_builtin_headers_resolve_through_resource_dir(self) -> None:
        header = self.write_header("buffer.h", SIZED_HEADER)
        frontend = ClangFrontend([str(self.include_dir)], resource_dir=find_resource_dir())

        tree = frontend.parse(header)
        unit = BridgeModelBuilder(GeneratorOptions(), self.diagnostics).build(tree)

        self.assertEqual(tree.errors, ())
        self.assertEqual(unit.classes[0].methods[0].parameters[0].type_spelling, "size_t")

    def test_cli_generates_only_successful_units(self) -> None:
        good = self.write_header("shapes/shape.h", SHAPE_HEADER)
        broken = self.write_header("broken.h", BROKEN_HEADER)
        output = self.workspace / "out"

        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            status = main([
                "--output", str(output),
                "--include", str(self.include_dir),
                "--headers", str(broken), str(good),
            ])

        self.assertEqual(status, 0)
        generated = output / "shapes" / "shape_bridge.h"
        self.assertTrue(generated.is_file())
        self.assertFalse((output / "broken_bridge.h").exists())
        self.assertIn(f"Generated: {generated}", stdout.getvalue())
        content = generated.read_text(encoding="utf-8")
        self.assertIn("using ArgsType_move_1 = std::tuple<const geo::Point&, float*>;", content)
        self.assertIn("inline void Registry_Call(RegistryHandle handle, uint32_t methodID, void* param) {", content)


class CompileArgumentTests(unittest.TestCase):
    def test_resource_dir_and_extra_args_follow_the_standard(self) -> None:
        frontend = ClangFrontend(
            ["/repo/include"],
            std="c++17",
            extra_args=["-DNDEBUG", "-isystem/opt/sdk/include"],
            resource_dir="/opt/clang/lib/clang/18",
        )

        self.assertEqual(frontend.compile_args(), [
            "-x", "c++", "-std=c++17",
            "-resource-dir", "/opt/clang/lib/clang/18",
            "-I/repo/include",
            "-DNDEBUG", "-isystem/opt/sdk/include",
        ])

    def test_no_resource_dir_without_clang_on_path(self) -> None:
        with mock.patch("bridgegen.clang_frontend.shutil.which", return_value=None):
            self.assertIsNone(find_resource_dir())

    def test_resource_dir_is_read_from_clang(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            (Path(tmp) / "include").mkdir()
            completed = subprocess.CompletedProcess(["clang"], 0, stdout=f"{tmp}\n", stderr="")
            with mock.patch("bridgegen.clang_frontend.shutil.which", return_value="/usr/bin/clang"), \
                    mock.patch("bridgegen.clang_frontend.subprocess.run", return_value=completed) as run:
                self.assertEqual(find_resource_dir(), tmp)
        run.assert_called_once_with(["/usr/bin/clang", "-print-resource-dir"],
                                    capture_output=True, text=True, check=True)

    def test_failing_clang_gives_no_resource_dir(self) -> None:
        failure = subprocess.CalledProcessError(1, ["clang", "-print-resource-dir"])
        with mock.patch("bridgegen.clang_frontend.shutil.which", return_value="/usr/bin/clang"), \
                mock.patch("bridgegen.clang_frontend.subprocess.run", side_effect=failure):
            self.assertIsNone(find_resource_dir())

    def test_cli_passes_extra_args_and_resource_dir_to_front_end(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("bridgegen.cli.ClangFrontend") as frontend_class, \
                    contextlib.redirect_stdout(io.StringIO()):
                status = main([
                    "-o", str(Path(tmp) / "out"),
                    "-i", str(Path(tmp) / "include"),
                    "-H", str(Path(tmp) / "include" / "missing.h"),
                    "--resource-dir", "/opt/clang/lib/clang/18",
                    "--extra-arg=-DNDEBUG",
                    "--extra-arg=-isystem/opt/sdk/include",
                ])

        self.assertEqual(status, 0)
        _, kwargs = frontend_class.call_args
        self.assertEqual(kwargs["extra_args"], ["-DNDEBUG", "-isystem/opt/sdk/include"])
        self.assertEqual(kwargs["resource_dir"], "/opt/clang/lib/clang/18")

    def test_extra_arg_defaults_to_empty(self) -> None:
        args = build_parser().parse_args(["-o", "out", "-i", "include", "-H", "a.h"])

        self.assertEqual(args.extra_args, [])
        self.assertEqual(args.resource_dir, "")


if __name__ == "__main__":
    unittest.main()
