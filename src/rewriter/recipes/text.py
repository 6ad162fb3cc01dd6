"""Built-in recipes.

These operate on plain text and paths only; none of them parses source code.
"""
from __future__ import annotations

import dataclasses
import posixpath
import re
from dataclasses import dataclass
from typing import Any, Optional

from ..matching import matches
from ..models import SourceFile

def _applies(file_pattern: str | None, path: str) -> bool:
    return file_pattern is None or matches(path, file_pattern)

@dataclass
class NoOp:
    """Leaves every file untouched."""
    name: str

    @classmethod
    def from_options(cls, name: str, options: dict[str, Any]) -> "NoOp":
        return cls(name=name)

    def visit(self, source: SourceFile) -> Optional[SourceFile]:
        return source

    def generate(self, existing: set[str]) -> list[SourceFile]:
        return []

@dataclass
class FindAndReplace:
    name: str
    find: str
    replace: str = ""
    regex: bool = False
    file_pattern: str | None = None

    def __post_init__(self) -> None:
        if not self.find:
            raise ValueError("find must not be empty")
        if self.regex:
            try:
                self._re = re.compile(self.find)
            except re.error as e:
                raise ValueError(f"invalid regex {self.find!r}: {e}") from e

    @classmethod
    def from_options(cls, name: str, options: dict[str, Any]) -> "FindAndReplace":
        return cls(
            name=name,
            find=str(options["find"]) if "find" in options else "",
            replace=str(options.get("replace", "")),
            regex=bool(options.get("regex", False)),
            file_pattern=options.get("file_pattern"),
        )

    def visit(self, source: SourceFile) -> Optional[SourceFile]:
        if not _applies(self.file_pattern, source.path):
            return source
        if self.regex:
            content = self._re.sub(self.replace, source.content)
        else:
            content = source.content.replace(self.find, self.replace)
        if content == source.content:
            return source
        return dataclasses.replace(source, content=content)

    def generate(self, existing: set[str]) -> list[SourceFile]:
        return []

@dataclass
class DeleteFiles:
    name: str
    file_pattern: str

    @classmethod
    def from_options(cls, name: str, options: dict[str, Any]) -> "DeleteFiles":
        return cls(name=name, file_pattern=str(options["file_pattern"]))

    def visit(self, source: SourceFile) -> Optional[SourceFile]:
        if matches(source.path, self.file_pattern):
            return None
        return source

    def generate(self, existing: set[str]) -> list[SourceFile]:
        return []

@dataclass
class MoveFiles:
    """Moves matching files into `destination`, keeping their file names."""
    name: str
    file_pattern: str
    destination: str

    @classmethod
    def from_options(cls, name: str, options: dict[str, Any]) -> "MoveFiles":
        return cls(name=name, file_pattern=str(options["file_pattern"]),
                   destination=str(options["destination"]).strip("/"))

    def visit(self, source: SourceFile) -> Optional[SourceFile]:
        if not matches(source.path, self.file_pattern):
            return source
        new_path = posixpath.join(self.destination, posixpath.basename(source.path)) if self.destination \
            else posixpath.basename(source.path)
        return dataclasses.replace(source, path=new_path)

    def generate(self, existing: set[str]) -> list[SourceFile]:
        return []

@dataclass
class CreateTextFile:
    name: str
    relative_path: str
    content: str = ""

    @classmethod
    def from_options(cls, name: str, options: dict[str, Any]) -> "CreateTextFile":
        return cls(name=name, relative_path=str(options["relative_path"]).strip("/"),
                   content=str(options.get("content", "")))

    def visit(self, source: SourceFile) -> Optional[SourceFile]:
        return source

    def generate(self, existing: set[str]) -> list[SourceFile]:
        if self.relative_path in existing:
            return []
        return [SourceFile(path=self.relative_path, content=self.content)]
