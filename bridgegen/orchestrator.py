"""Runs the bridge pipeline over a list of headers and writes the results"""

import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .bridge_generator import BridgeEmitter
from .diagnostics import Diagnostics
from .errors import BridgeGenerationError, FrontendError
from .model_builder import BridgeModelBuilder
from .options import GeneratorOptions
from .types import DeclarationTree


class Frontend(Protocol):
    def parse(self, path: Path) -> DeclarationTree:
        ...


@dataclass
class GenerationResult:
    written: list[Path] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)


@dataclass(frozen=True)
class _UnitOutcome:
    header: Path
    output: Optional[Path] = None
    reason: str = ""


def ensure_directory(path: Path) -> None:
    """Create `path` and its parents; another worker creating it first is fine"""
    path.mkdir(parents=True, exist_ok=True)


def ensure_writable(path: Path) -> None:
    """Raise OSError unless a file can be created in `path`"""
    with tempfile.NamedTemporaryFile(dir=path, prefix=".bridgegen-"):
        pass


class GenerationOrchestrator:
    """Parses, models, emits and writes one bridge file per header.

    Units are independent: a header that is missing, fails to parse or has
    nothing to export is reported and skipped while the others proceed.
    Only an unusable output root stops the run, before any header is read.
    """

    def __init__(self, frontend: Frontend, options: GeneratorOptions,
                 diagnostics: Diagnostics, jobs: int = 1):
        self.frontend = frontend
        self.options = options
        self.diagnostics = diagnostics
        self.jobs = max(1, jobs)
        self.builder = BridgeModelBuilder(options, diagnostics)
        self.emitter = BridgeEmitter(options)

    def run(self, headers: Sequence, output_root, now: Optional[datetime] = None) -> GenerationResult:
        output_root = Path(output_root)
        self.setup_output_root(output_root)
        generated_at = (now or datetime.now()).strftime(self.options.timestamp_format)
        headers = [Path(h) for h in headers]

        if self.jobs == 1 or len(headers) <= 1:
            outcomes = [self.generate_unit(h, output_root, generated_at) for h in headers]
        else:
            with ThreadPoolExecutor(max_workers=self.jobs) as pool:
                outcomes = list(pool.map(lambda h: self.generate_unit(h, output_root, generated_at), headers))

        result = GenerationResult()
        for outcome in outcomes:
            if outcome.output is not None:
                result.written.append(outcome.output)
            else:
                result.skipped.append((outcome.header, outcome.reason))
        return result

    def setup_output_root(self, output_root: Path) -> None:
        try:
            ensure_directory(output_root)
            ensure_writable(output_root)
        except OSError as exc:
            self.diagnostics.error(f"Error preparing output directory '{output_root}': {exc}")
            raise BridgeGenerationError(f"Failed to setup output directory '{output_root}'") from exc

    def generate_unit(self, header: Path, output_root: Path, generated_at: str) -> _UnitOutcome:
        source = str(header)
        if not header.is_file():
            self.diagnostics.error(f"Error: File '{header}' does not exist.", source)
            return _UnitOutcome(header, reason="missing")

        try:
            tree = self.frontend.parse(header)
        except FrontendError as exc:
            self.diagnostics.error(str(exc), source)
            return _UnitOutcome(header, reason="frontend failure")

        unit = self.builder.build(tree)
        if unit.errors:
            return _UnitOutcome(header, reason="parse errors")
        if not unit.has_exports:
            self.diagnostics.info("No exported classes, skipping", source)
            return _UnitOutcome(header, reason="no exported classes")

        output = self.options.output_path(output_root, header)
        content = self.emitter.generate(unit, generated_at)
        try:
            ensure_directory(output.parent)
            output.write_text(content, encoding="utf-8")
        except OSError as exc:
            self.diagnostics.error(f"Could not write '{output}': {exc}", source)
            return _UnitOutcome(header, reason="write failure")

        self.diagnostics.debug(f"Wrote {output}", source)
        return _UnitOutcome(header, output=output)
