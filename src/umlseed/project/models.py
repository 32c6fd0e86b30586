"""Resolved relational model.

``SQLTableCollection`` is the durable artifact of an extraction: it is what
the store persists and what the fake entry generator consumes. It keeps no
reference to the raw parse trees it was assembled from.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

CHAR_MAX_SIZE = 255
VARCHAR_MAX_SIZE = 65535


class SQLTypeName(str, Enum):
    """Primitive SQL type categories, without size."""

    INT = "int"
    DECIMAL = "decimal"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    FLOAT = "float"
    BOOL = "bool"
    CHAR = "char"
    VARCHAR = "varchar"

    @property
    def is_sized(self) -> bool:
        return self in (SQLTypeName.CHAR, SQLTypeName.VARCHAR)

    @property
    def is_temporal(self) -> bool:
        return self in (SQLTypeName.DATE, SQLTypeName.TIME, SQLTypeName.DATETIME)


class SQLType(BaseModel):
    """Concrete column type. ``size`` is set for CHAR and VARCHAR only."""

    model_config = ConfigDict(frozen=True)

    name: SQLTypeName
    size: int | None = None

    @model_validator(mode="after")
    def check_size(self) -> SQLType:
        if not self.name.is_sized:
            if self.size is not None:
                raise ValueError(f"{self.name.value} does not take a size")
            return self
        limit = CHAR_MAX_SIZE if self.name is SQLTypeName.CHAR else VARCHAR_MAX_SIZE
        if self.size is None or not (0 <= self.size <= limit):
            raise ValueError(f"{self.name.value} size must be within 0..{limit}")
        return self

    @classmethod
    def char(cls, size: int) -> SQLType:
        return cls(name=SQLTypeName.CHAR, size=size)

    @classmethod
    def varchar(cls, size: int) -> SQLType:
        return cls(name=SQLTypeName.VARCHAR, size=size)

    def __str__(self) -> str:
        if self.size is not None:
            return f"{self.name.value.upper()}({self.size})"
        return self.name.value.upper()


class OneOf(BaseModel):
    """Enumerated check: ``in ('a', 'b')``."""

    kind: Literal["one_of"] = "one_of"
    options: list[str]


class Freeform(BaseModel):
    """Any other check body, kept verbatim."""

    kind: Literal["freeform"] = "freeform"
    body: str


CheckConstraint = Annotated[OneOf | Freeform, Field(discriminator="kind")]


class SQLColumn(BaseModel):
    name: str
    sql_type: SQLType
    primary_key: bool = False
    nullable: bool = False
    foreign_key: tuple[str, str] | None = None  # (table name, column name)
    check_constraint: CheckConstraint | None = None


class SQLTable(BaseModel):
    name: str
    columns: list[SQLColumn] = Field(default_factory=list)

    def column_index(self, name: str) -> int | None:
        for idx, column in enumerate(self.columns):
            if column.name == name:
                return idx
        return None


class SQLTableCollection(BaseModel):
    tables: list[SQLTable] = Field(default_factory=list)

    def table_index(self, name: str) -> int | None:
        for idx, table in enumerate(self.tables):
            if table.name == name:
                return idx
        return None
