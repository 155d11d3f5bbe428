"""Core data models shared across podweave components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .errors import PodweaveError
    from .licenses.base import License


@dataclass(frozen=True)
class WeaveMetadata:
    """Metadata supplied on the command line and shared by every woven file."""

    license: Optional["License"] = None
    version: Optional[str] = None
    authors: Tuple[str, ...] = field(default_factory=tuple)


class FileStatus(str, Enum):
    """Terminal state of the per-file pipeline."""

    WOVEN = "woven"
    REJECTED = "rejected"
    FATAL = "fatal"


@dataclass
class FileResult:
    """Outcome of weaving a single source file."""

    path: Path
    status: FileStatus
    text: str = ""
    warning: Optional[str] = None
    error: Optional["PodweaveError"] = None

    @classmethod
    def woven(cls, path: Path, text: str) -> "FileResult":
        return cls(path=path, status=FileStatus.WOVEN, text=text)

    @classmethod
    def rejected(cls, path: Path, warning: str) -> "FileResult":
        return cls(path=path, status=FileStatus.REJECTED, warning=warning)

    @classmethod
    def fatal(cls, path: Path, error: "PodweaveError") -> "FileResult":
        return cls(path=path, status=FileStatus.FATAL, error=error)

    @property
    def is_fatal(self) -> bool:
        return self.status is FileStatus.FATAL


__all__ = ["FileResult", "FileStatus", "WeaveMetadata"]
