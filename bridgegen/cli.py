"""Command-line entry point: bridgegen -o OUT -i INCLUDE --headers H [H ...]"""

import argparse
import logging
import sys
import time

from .clang_frontend import ClangFrontend, find_resource_dir
from .diagnostics import Diagnostics
from .errors import BridgeGenerationError
from .options import GeneratorOptions
from .orchestrator import GenerationOrchestrator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Bridge Generator Tool")
    parser.add_argument("--output", "-o", required=True,
                        help="Path to output directory where generated files will be stored")
    parser.add_argument("--include", "-i", required=True,
                        help="Path to the root include directory")
    parser.add_argument("--headers", "-H", required=True, nargs="+",
                        help="Header files to process")
    parser.add_argument("--std", default="c++20", help="C++ standard passed to libclang")
    parser.add_argument("--jobs", "-j", type=int, default=1, help="Headers processed in parallel")
    parser.add_argument("--libclang", default="", help="Path to the libclang shared library")
    parser.add_argument("--resource-dir", default="",
                        help="clang resource directory holding the builtin headers "
                             "(default: asked from the clang on PATH)")
    parser.add_argument("--extra-arg", "-X", dest="extra_args", action="append", default=[],
                        help="Extra argument passed to libclang, repeatable (e.g. --extra-arg=-DNDEBUG)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv=None) -> int:
    start_time = time.perf_counter()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    diagnostics = Diagnostics()
    frontend = ClangFrontend(
        [args.include],
        std=args.std,
        extra_args=args.extra_args,
        library_file=args.libclang or None,
        resource_dir=args.resource_dir or find_resource_dir(),
    )
    orchestrator = GenerationOrchestrator(frontend, GeneratorOptions(), diagnostics, jobs=args.jobs)

    try:
        result = orchestrator.run(args.headers, args.output)
    except BridgeGenerationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    for path in result.written:
        print(f"Generated: {path}")
    for header, reason in result.skipped:
        print(f"Skipped: {header} ({reason})")

    elapsed = time.perf_counter() - start_time
    print(f"Generation completed in {elapsed*1000:.2f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
