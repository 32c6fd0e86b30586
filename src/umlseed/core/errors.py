"""umlseed error types with typed error codes.

Error code ranges:
- 1xxx: Archive / document structure
- 2xxx: Config
- 3xxx: Cross-document references
- 4xxx: Type vocabulary
- 5xxx: Fake data generation
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Archive (1xxx)
    ARCHIVE_ENTRY_MISSING = 1001
    ARCHIVE_NOT_AN_ARCHIVE = 1002
    ARCHIVE_UNSUPPORTED_FILE = 1003
    ARCHIVE_END_OF_DOCUMENT = 1004
    ARCHIVE_MALFORMED_XML = 1005
    ARCHIVE_ATTRIBUTE_MISSING = 1006
    ARCHIVE_NO_SCRIPTS = 1007
    ARCHIVE_SCRIPT_NOT_FOUND = 1008

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # References (3xxx)
    REFERENCE_CLASS_NOT_FOUND = 3001
    REFERENCE_PROPERTY_NOT_FOUND = 3002
    REFERENCE_TYPE_NOT_RESOLVED = 3003
    REFERENCE_MISSING = 3004
    REFERENCE_MISSING_NAME = 3005

    # Vocabulary (4xxx)
    VOCABULARY_UNKNOWN_TYPE = 4001
    VOCABULARY_TYPE_SIZE_OUT_OF_RANGE = 4002

    # Generation (5xxx)
    GENERATION_FIXED_POINT_STALLED = 5001
    GENERATION_UNKNOWN_FOREIGN_TARGET = 5002
    GENERATION_INVALID_GUESS = 5003

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class UmlSeedError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'ARCHIVE_ENTRY_MISSING')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ArchiveError(UmlSeedError):
    """Project archive and XML document structure errors."""

    @classmethod
    def entry_missing(cls, entry: str) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_ENTRY_MISSING,
            message=f"Required archive entry not found: {entry}",
            details={"entry": entry},
        )

    @classmethod
    def not_an_archive(cls, reason: str) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_NOT_AN_ARCHIVE,
            message=f"Not a readable project archive: {reason}",
            details={"reason": reason},
        )

    @classmethod
    def unsupported_file(cls, filename: str, extension: str) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_UNSUPPORTED_FILE,
            message=f"Unsupported project file '{filename}', expected a '{extension}' archive",
            details={"filename": filename, "extension": extension},
        )

    @classmethod
    def end_of_document(cls, document: str | None = None) -> "ArchiveError":
        where = f" in {document}" if document else ""
        return cls(
            code=ErrorCode.ARCHIVE_END_OF_DOCUMENT,
            message=f"Unexpected end of XML document{where}",
            details={"document": document},
        )

    @classmethod
    def malformed_xml(cls, document: str, reason: str) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_MALFORMED_XML,
            message=f"Malformed XML in {document}: {reason}",
            details={"document": document, "reason": reason},
        )

    @classmethod
    def attribute_missing(cls, element: str, attribute: str) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_ATTRIBUTE_MISSING,
            message=f"XML attribute '{attribute}' not found on <{element}>",
            details={"element": element, "attribute": attribute},
        )

    @classmethod
    def no_scripts(cls) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_NO_SCRIPTS,
            message="Project archive does not contain any DDL script",
        )

    @classmethod
    def script_not_found(cls, index: int, count: int) -> "ArchiveError":
        return cls(
            code=ErrorCode.ARCHIVE_SCRIPT_NOT_FOUND,
            message=f"DDL script #{index} not found, archive has {count}",
            details={"index": index, "count": count},
        )


class ConfigError(UmlSeedError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class ModelReferenceError(UmlSeedError):
    """An id or href from one document has no counterpart in another."""

    @classmethod
    def class_not_found(cls, class_id: str) -> "ModelReferenceError":
        return cls(
            code=ErrorCode.REFERENCE_CLASS_NOT_FOUND,
            message=f"UML class not found: {class_id}",
            details={"class_id": class_id},
        )

    @classmethod
    def property_not_found(cls, class_name: str, property_id: str) -> "ModelReferenceError":
        return cls(
            code=ErrorCode.REFERENCE_PROPERTY_NOT_FOUND,
            message=f"Property {property_id} not found in class '{class_name}'",
            details={"class": class_name, "property_id": property_id},
        )

    @classmethod
    def type_not_resolved(cls, property_name: str, type_href: str) -> "ModelReferenceError":
        return cls(
            code=ErrorCode.REFERENCE_TYPE_NOT_RESOLVED,
            message=f"Type of property '{property_name}' could not be resolved: {type_href}",
            details={"property": property_name, "type_href": type_href},
        )

    @classmethod
    def missing_reference(cls, container: str, reference: str) -> "ModelReferenceError":
        return cls(
            code=ErrorCode.REFERENCE_MISSING,
            message=f"{container} is missing its {reference} reference",
            details={"container": container, "reference": reference},
        )

    @classmethod
    def missing_name(cls, kind: str, element_id: str) -> "ModelReferenceError":
        return cls(
            code=ErrorCode.REFERENCE_MISSING_NAME,
            message=f"UML {kind} {element_id} has no name",
            details={"kind": kind, "id": element_id},
        )


class VocabularyError(UmlSeedError):
    """Type names or type sizes outside the known grammar."""

    @classmethod
    def unknown_type(cls, type_name: str) -> "VocabularyError":
        return cls(
            code=ErrorCode.VOCABULARY_UNKNOWN_TYPE,
            message=f"Unknown SQL type: '{type_name}'",
            details={"type_name": type_name},
        )

    @classmethod
    def type_size_out_of_range(cls, type_name: str, size: int, limit: int) -> "VocabularyError":
        return cls(
            code=ErrorCode.VOCABULARY_TYPE_SIZE_OUT_OF_RANGE,
            message=f"Size {size} exceeds the {type_name} limit of {limit}",
            details={"type_name": type_name, "size": size, "limit": limit},
        )


class GenerationError(UmlSeedError):
    """Fake data generation errors. The resolved model stays valid."""

    @classmethod
    def fixed_point_stalled(cls, pending: int) -> "GenerationError":
        return cls(
            code=ErrorCode.GENERATION_FIXED_POINT_STALLED,
            message=f"Failed to resolve foreign keys, {pending} rows still pending",
            details={"pending": pending},
        )

    @classmethod
    def unknown_foreign_target(cls, table: str, column: str) -> "GenerationError":
        return cls(
            code=ErrorCode.GENERATION_UNKNOWN_FOREIGN_TARGET,
            message=f"Foreign key target {table}.{column} is not part of the collection",
            details={"table": table, "column": column},
        )

    @classmethod
    def invalid_guess(cls, column: str, reason: str) -> "GenerationError":
        return cls(
            code=ErrorCode.GENERATION_INVALID_GUESS,
            message=f"Invalid generator for column '{column}': {reason}",
            details={"column": column, "reason": reason},
        )


class InternalError(UmlSeedError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
