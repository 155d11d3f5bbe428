"""Per-file pipeline: read, parse, scan, extract, assemble and weave."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from .config import require_config
from .errors import DecodingError, ParseError, PodweaveError, SourceReadError, WeaveError
from .extract import assemble, has_pod_in_literals, pod_fragments
from .logging import get_logger
from .models import FileResult, WeaveMetadata
from .perl import Document, parse_document
from .weaver import Weaver


class Orchestrator:
    """Coordinates weaving for each input file in command-line order."""

    def __init__(
        self,
        config_root: Path,
        weaver_factory: Optional[Callable[[Path], Weaver]] = None,
    ) -> None:
        self.config_root = Path(config_root)
        self._weaver_factory = weaver_factory or Weaver.from_config
        self.logger = get_logger("orchestrator")

    def check_config(self) -> Path:
        """Fail fast when the weaver configuration is missing."""
        return require_config(self.config_root)

    def run(self, paths: Iterable[str | Path], metadata: WeaveMetadata) -> Iterator[FileResult]:
        """Yield a result per path, stopping after the first fatal one."""
        for path in paths:
            result = self.weave_file(Path(path), metadata)
            yield result
            if result.is_fatal:
                return

    def weave_file(self, path: Path, metadata: WeaveMetadata) -> FileResult:
        """Weave a single file, turning pipeline failures into a fatal result."""
        try:
            return self._weave_file(path, metadata)
        except PodweaveError as exc:
            self.logger.debug("Weaving %s failed: %s", path, exc)
            return FileResult.fatal(path, exc)

    def _weave_file(self, path: Path, metadata: WeaveMetadata) -> FileResult:
        self.logger.debug("Reading %s", path)
        text = self._read_source(path)
        document = self._parse(path, text)

        if has_pod_in_literals(document):
            warning = f"can't weave '{path}': There is POD in string literals"
            self.logger.warning(warning)
            return FileResult.rejected(path, warning)

        fragments = pod_fragments(document)
        self.logger.debug("Collected %d POD fragments from %s", len(fragments), path)
        pod_document = assemble(fragments)

        try:
            weaver = self._weaver_factory(self.config_root)
            woven = weaver.weave_document(
                pod_document, document, metadata, filename=str(path)
            )
        except Exception as exc:
            raise WeaveError(path, exc) from exc

        return FileResult.woven(path, woven.as_pod_string())

    @staticmethod
    def _read_source(path: Path) -> str:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise SourceReadError(path, exc) from exc
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodingError(path, exc) from exc

    @staticmethod
    def _parse(path: Path, text: str) -> Document:
        try:
            return parse_document(text)
        except ParseError as exc:
            error = ParseError(f'Cannot parse "{path}": {exc}')
            error.line = exc.line
            raise error from exc


__all__ = ["Orchestrator"]
