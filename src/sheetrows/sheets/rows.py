"""
Typed records for the rows of a tab.

A record type is a frozen dataclass deriving from RowModel that declares its
columns, in sheet order, with the type each column decodes to:

    @dataclass(frozen=True)
    class Person(RowModel):
        columns: ClassVar[dict[str, ColumnType]] = {
            "id": ColumnType.STRING,
            "name": ColumnType.STRING,
            "age": ColumnType.INTEGER,
        }
        id: str = ""
        name: str = ""
        age: int|None = None

The declared fields must follow the same order as columns, every field needs
a default, and `row` (inherited) tracks the record's position in the tab.
Records are immutable: assign() returns a new record.
"""
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any, ClassVar, Self

from ..errors import SheetError
from .codec import ColumnType, decode, encode, infer_type

# name of the field that tracks the row's position in the tab
ROW_POSITION = 'row'

@dataclass(frozen=True)
class RowModel():
    """
    Base for a tab's record type.  Subclasses declare `columns` and,
    if it isn't `id`, the `key_column`.
    A column typed None falls back to inferring its type from the value the
    field currently holds.
    """
    columns: ClassVar[dict[str, ColumnType|None]] = {}
    key_column: ClassVar[str] = 'id'

    row: int = 0

    @classmethod
    def header(cls) -> list[str]:
        """The sheet column names for this record type, in column order"""
        return list(cls.columns)

    @classmethod
    def field_names(cls) -> list[str]:
        """Declared dataclass fields, less the row position"""
        return [f.name for f in fields(cls) if f.name != ROW_POSITION]

    @classmethod
    def check_schema(cls) -> None:
        """
        The declared fields must line up with the declared columns and
        include the key column.
        """
        names = cls.field_names()
        header = cls.header()
        if names != header:
            raise SheetError(f"{cls.__name__} fields {','.join(names)} do not match columns {','.join(header)}")
        if cls.key_column not in header:
            raise SheetError(f"{cls.__name__} has no key column '{cls.key_column}'")

    @classmethod
    def from_values(cls, values: Mapping|list|tuple|None = None, row: int = 0) -> Self:
        """Make a record from cell text, by name or by position"""
        return cls(row=row).assign(values)

    @property
    def key(self) -> Any:
        return getattr(self, self.key_column)

    def values(self) -> list[str]:
        """Encoded cell text for the entire row, in column order"""
        return [encode(getattr(self, h)) for h in self.header()]

    def _cast(self, name: str, value: Any) -> Any:
        column_type = self.columns.get(name)
        if column_type is None:
            column_type = infer_type(getattr(self, name))
        return decode(column_type, value)

    def assign(self, values: Mapping|list|tuple|None) -> Self:
        """
        A copy of this record with new values.  A list assigns by column
        position, a mapping by name.  Names that aren't columns are ignored,
        except `row` which moves the record.
        """
        if not values:
            return self
        changes = {}
        if isinstance(values, Mapping):
            for k, v in values.items():
                if k == ROW_POSITION:
                    changes[k] = int(v or 0)
                elif k in self.columns:
                    changes[k] = self._cast(k, v)
        else:
            header = self.header()
            for index, v in enumerate(values):
                if index >= len(header):
                    break
                key = header[index]
                changes[key] = self._cast(key, v)
        return replace(self, **changes)
