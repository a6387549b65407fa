"""Generator options and the path rules that depend on them"""

import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

CLASS_MARKER = "bridge_class"
METHOD_MARKER = "bridge_func"


def normalize_path(path) -> str:
    return str(path).replace("\\", "/")


@dataclass(frozen=True)
class GeneratorOptions:
    """Markers and path layout used to locate, name and include headers.

    `include_marker` is the directory segment after which include paths are
    written; `source_root` is the tree whose layout the output mirrors.
    """
    class_marker: str = CLASS_MARKER
    method_marker: str = METHOD_MARKER
    include_marker: str = "include/"
    source_root: str = "include/impact"
    output_suffix: str = "_bridge"
    timestamp_format: str = "%Y-%m-%d %H:%M"

    def include_path(self, header) -> str:
        """Path used in the generated #include, e.g. impact/foo/bar.h"""
        normalized = normalize_path(header)
        parts = normalized.split(self.include_marker, 1)
        return parts[1] if len(parts) > 1 else PurePosixPath(normalized).name

    def display_path(self, header) -> str:
        """Project-relative form recorded in the file header comment"""
        normalized = normalize_path(header)
        remainder = self._below_source_root(normalized)
        if remainder is None:
            return normalized
        return f"{PurePosixPath(self.source_root).name}/{remainder}"

    def relative_output_dir(self, header) -> str:
        """Directory of the header below the source root, '' when outside it"""
        directory = normalize_path(PurePosixPath(normalize_path(header)).parent)
        return self._below_source_root(directory) or ""

    def _below_source_root(self, path: str) -> Optional[str]:
        """Rest of `path` after the first whole-segment, case-sensitive match of source_root"""
        root = re.escape(self.source_root.strip("/"))
        match = re.search(rf"(?:^|/){root}(?=/|$)", path)
        if match is None:
            return None
        return path[match.end():].strip("/")

    def output_name(self, header) -> str:
        path = PurePosixPath(normalize_path(header))
        return f"{path.stem}{self.output_suffix}{path.suffix}"

    def output_path(self, output_root, header) -> Path:
        relative = self.relative_output_dir(header)
        root = Path(output_root)
        directory = root / relative if relative else root
        return directory / self.output_name(header)
