"""MagicDraw project archive (.mdzip) extraction.

An .mdzip is a zip of independent XML documents. Extraction reads:

- the UML model document (class tree + SQL profile modifiers)
- the DDL code-engineering document (which classes/properties are scripted)
- the project manifest and shared-model snapshots (primitive type names)

and joins them into one SQLTableCollection per DDL script. Each entry is
opened for exactly one document scan and closed before the next.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO

from umlseed.core.errors import ArchiveError
from umlseed.core.logging import get_logger
from umlseed.project.assembler import assemble_collections
from umlseed.project.ddl import DDLProject, parse_ddl_projects
from umlseed.project.models import SQLTableCollection, SQLTypeName
from umlseed.project.sql_types import (
    find_used_packages,
    is_snapshot_entry,
    parse_primitive_types,
)
from umlseed.project.uml_model import UMLDocument, parse_uml_model

log = get_logger("project.archive")

PROJECT_EXTENSION = ".mdzip"

MANIFEST_ENTRY = "com.nomagic.ci.metamodel.project"
UML_MODEL_ENTRY = "com.nomagic.magicdraw.uml_model.model"
DDL_ENTRY = "personal-com.nomagic.magicdraw.ce.dmn.personaldmncodeengineering"

ProjectSource = str | Path | bytes | IO[bytes]


def can_parse(filename: str) -> bool:
    """Check if a file name looks like a MagicDraw project archive."""
    return filename.endswith(PROJECT_EXTENSION)


class ProjectArchive:
    """Read access to the documents inside one project archive."""

    def __init__(self, source: ProjectSource) -> None:
        if isinstance(source, bytes):
            source = io.BytesIO(source)
        try:
            self._zip = zipfile.ZipFile(source)
        except (zipfile.BadZipFile, OSError) as e:
            raise ArchiveError.not_an_archive(str(e)) from e

    def __enter__(self) -> ProjectArchive:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._zip.close()

    def names(self) -> list[str]:
        return self._zip.namelist()

    @contextmanager
    def open_entry(self, name: str) -> Iterator[IO[bytes]]:
        try:
            entry = self._zip.open(name)
        except KeyError:
            raise ArchiveError.entry_missing(name) from None
        with entry:
            yield entry

    def read_uml_model(self) -> UMLDocument:
        with self.open_entry(UML_MODEL_ENTRY) as stream:
            return parse_uml_model(stream, document=UML_MODEL_ENTRY)

    def read_ddl_projects(self) -> list[DDLProject]:
        with self.open_entry(DDL_ENTRY) as stream:
            return parse_ddl_projects(stream, document=DDL_ENTRY)

    def read_sql_types(self, type_hrefs: set[str]) -> dict[str, SQLTypeName]:
        with self.open_entry(MANIFEST_ENTRY) as stream:
            used_packages = find_used_packages(stream, type_hrefs, document=MANIFEST_ENTRY)

        resolved: dict[str, SQLTypeName] = {}
        for name in self.names():
            if not is_snapshot_entry(name):
                continue
            with self.open_entry(name) as stream:
                resolved.update(parse_primitive_types(stream, used_packages, document=name))
        return resolved


def extract_collections(source: ProjectSource) -> list[SQLTableCollection]:
    """Extract one table collection per DDL script in the archive.

    Raises:
        ArchiveError: Missing entries, non-zip input, malformed or truncated XML.
        ModelReferenceError: Cross-document ids that cannot be located.
        VocabularyError: Unknown primitive type names or oversized types.
    """
    with ProjectArchive(source) as archive:
        document = archive.read_uml_model()
        projects = archive.read_ddl_projects()
        sql_types = archive.read_sql_types(document.used_type_hrefs())

    collections = assemble_collections(document, projects, sql_types)
    log.info(
        "project_extracted",
        collections=len(collections),
        tables=sum(len(c.tables) for c in collections),
    )
    return collections


def extract_collection(source: ProjectSource, *, script: int = 0) -> SQLTableCollection:
    """Extract the table collection of one DDL script (the first by default)."""
    collections = extract_collections(source)
    if not collections:
        raise ArchiveError.no_scripts()
    if not 0 <= script < len(collections):
        raise ArchiveError.script_not_found(script, len(collections))
    return collections[script]


def load_project(data: bytes, filename: str) -> SQLTableCollection:
    """Extract the first collection from uploaded archive bytes.

    Raises:
        ArchiveError: If the file name does not carry the project extension.
    """
    if not can_parse(filename):
        raise ArchiveError.unsupported_file(filename, PROJECT_EXTENSION)
    return extract_collection(data)
