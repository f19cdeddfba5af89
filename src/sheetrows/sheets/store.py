"""
Create/update/find (no delete) over the rows of one tab.

The store holds every row of the tab as typed records, an index of the rows
by key column, and a map of remote row position to list position.  Both maps
are rebuilt from scratch after every successful write.  That costs O(n) per
write, fine for the small tables a spreadsheet holds.  A write that fails
leaves the store exactly as it was.

Nothing guards against concurrent writers: two updates to the same row race
at the service and the last response wins.  Callers serialize writes to a
store themselves.
"""
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

from loguru import logger

from ..errors import SheetError
from .a1 import SheetsA1
from .client import SheetClient
from .codec import encode
from .indexer import TabTable
from .resources import UpdateValuesResponse
from .rows import ROW_POSITION, RowModel

T = TypeVar('T', bound=RowModel)

class RowStore(Generic[T]):
    """
    sheets:     client for the spreadsheet holding the tab
    name:       title of the tab
    table:      the tab as parsed by load_tab_table()
    row_type:   RowModel subclass for the tab's rows
    key_column: column the index is keyed on, defaults to row_type.key_column
    """
    def __init__(self, sheets: SheetClient, name: str, table: TabTable,
                 row_type: type[T], key_column: str|None = None) -> None:
        self.sheets = sheets
        self.name = name
        self.table = table
        self.row_type = row_type
        self.key_column = key_column or row_type.key_column
        row_type.check_schema()
        if self.key_column not in row_type.header():
            raise SheetError(f"{row_type.__name__} has no key column '{self.key_column}'")
        self.rows: list[T] = [row_type.from_values(r) for r in table.rows]
        self.index: dict[str, T] = {}
        self._positions: dict[int, int] = {}
        self.check_header()
        self.create_index()

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[T]:
        return iter(self.rows)

    def __repr__(self) -> str:
        return f"{self.__class__}:{self.name}({len(self)} rows)"

    @property
    def header(self) -> list[str]:
        """Tab column order, or the row type's for a tab with no header yet"""
        return self.table.header or self.row_type.header()

    @property
    def next_row(self) -> int:
        return len(self.rows)

    def check_header(self) -> bool:
        """Verify the column order in the tab matches the row type's columns"""
        if not self.rows:
            return True
        row_header = ','.join(self.rows[0].header())
        table_header = ','.join(self.table.header)
        if row_header != table_header:
            raise SheetError(f"Expected table.header to be {row_header} not {table_header}")
        return True

    def create_index(self) -> None:
        self.index = {}
        self._positions = {}
        for position, r in enumerate(self.rows):
            self.index[str(getattr(r, self.key_column))] = r
            self._positions[r.row] = position

    def position(self, row: int) -> int|None:
        """List position of the record at a remote row, None if not held"""
        return self._positions.get(row)

    def values(self, model: T) -> list[str]:
        """The record's cell text in table.header column order"""
        missing = [h for h in self.header if h not in self.row_type.columns]
        if missing:
            raise SheetError(f"{self.row_type.__name__} has no column for {','.join(missing)} in {self.name}")
        return [encode(getattr(model, h)) for h in self.header]

    def check_id(self, model: T) -> None:
        if not getattr(model, self.key_column, None):
            raise SheetError(f'"{self.key_column}" must be assigned for row {model.row}')

    def _echoed(self, model: T, update: UpdateValuesResponse, fallback_row: int) -> T:
        """
        The record as the service stored it: the echoed cell values if any
        came back, at the row named in the updated range.
        """
        result = model
        echoed = update.updatedData.first
        if echoed:
            # echoed in tab column order
            result = result.assign(dict(zip(self.header, echoed)))
        row = SheetsA1.range_row(update.updatedRange) or fallback_row
        return result.assign({ROW_POSITION: row})

    async def save(self, model: T) -> T:
        """A record with a non-zero row is an update, otherwise a create"""
        if model.row:
            return await self.update(model)
        return await self.create(model)

    async def create(self, model: T) -> T:
        self.check_id(model)
        if model.row != 0:
            raise SheetError(f'"{model.key}" row must be 0, not {model.row} to create')
        values = self.values(model)
        logger.info("creating {} in {}", model.key, self.name)
        result = await self.sheets.append_row(self.name, self.next_row, values)
        # header is row 1 so an empty tab appends at 2
        last = max(self._positions, default=1)
        created = self._echoed(model, result.updates, last + 1)
        self.rows.append(created)
        # id may have changed
        self.create_index()
        return created

    async def update(self, model: T) -> T:
        self.check_id(model)
        if not model.row:
            raise SheetError(f'"{model.key}" row must be > 0 to update')
        position = self.position(model.row)
        if position is None:
            raise SheetError(f'"{model.key}" row {model.row} is not in {self.name}')
        values = self.values(model)
        logger.info("updating {} at {} row {}", model.key, self.name, model.row)
        result = await self.sheets.update_row(self.name, model.row, values)
        updated = self._echoed(model, result, model.row)
        self.rows[position] = updated
        # id may have changed
        self.create_index()
        return updated

    def find(self, value: Any, column: str|None = None) -> T|None:
        """
        Find the first record with value in column.  A number with no column
        looks up by row position, the key column goes through the index and
        anything else is a scan.
        """
        if value is None or value == '':
            return None
        key = column or self.key_column
        if column is None and isinstance(value, (int, float)) and not isinstance(value, bool):
            key = ROW_POSITION
        if key == self.key_column:
            return self.index.get(str(value))
        for r in self.rows:
            if getattr(r, key, None) == value:
                return r
        return None
