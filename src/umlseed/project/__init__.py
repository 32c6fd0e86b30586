"""MagicDraw project extraction into SQL table collections.

Usage:
    from umlseed.project import extract_collection

    collection = extract_collection(Path("shop.mdzip"))
    for table in collection.tables:
        print(table.name, [str(c.sql_type) for c in table.columns])
"""

from umlseed.project.archive import (
    PROJECT_EXTENSION,
    ProjectArchive,
    can_parse,
    extract_collection,
    extract_collections,
    load_project,
)
from umlseed.project.assembler import parse_check_constraint
from umlseed.project.models import (
    CheckConstraint,
    Freeform,
    OneOf,
    SQLColumn,
    SQLTable,
    SQLTableCollection,
    SQLType,
    SQLTypeName,
)

__all__ = [
    # Extraction
    "PROJECT_EXTENSION",
    "ProjectArchive",
    "can_parse",
    "extract_collection",
    "extract_collections",
    "load_project",
    "parse_check_constraint",
    # Models
    "CheckConstraint",
    "Freeform",
    "OneOf",
    "SQLColumn",
    "SQLTable",
    "SQLTableCollection",
    "SQLType",
    "SQLTypeName",
]
