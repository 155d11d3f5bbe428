"""Error taxonomy shared by the podweave pipeline."""

from __future__ import annotations

from pathlib import Path


class PodweaveError(RuntimeError):
    """Base class for fatal podweave failures."""


class ConfigMissingError(PodweaveError):
    """Raised when no weaver configuration exists in the configuration root."""

    def __init__(self, root: Path, filename: str) -> None:
        self.root = root
        self.filename = filename
        super().__init__(f'Cannot find weaver config in "{root}". Missing "{filename}" file?')


class SourceReadError(PodweaveError):
    """Raised when a source file cannot be read."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f'Cannot read "{path}": {cause.strerror or cause}')


class DecodingError(PodweaveError):
    """Raised when a source file is not valid UTF-8."""

    def __init__(self, path: Path, cause: UnicodeDecodeError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f'Cannot decode "{path}" as UTF-8: {cause}')


class ParseError(PodweaveError):
    """Raised when Perl source cannot be turned into a syntax tree."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} at line {line}"
        super().__init__(message)


class LicenseResolutionError(PodweaveError):
    """Raised when a license name resolves neither by registry nor by import."""

    def __init__(self, name: str, cause: object) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Could not load license {name}: {cause}")


class WeaveError(PodweaveError):
    """Raised when the weaving pipeline fails for a file."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f'Error weaving POD for path "{path}": {cause}')


__all__ = [
    "ConfigMissingError",
    "DecodingError",
    "LicenseResolutionError",
    "ParseError",
    "PodweaveError",
    "SourceReadError",
    "WeaveError",
]
