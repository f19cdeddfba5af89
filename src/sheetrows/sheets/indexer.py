from dataclasses import dataclass, field

from ..errors import SheetError
from .resources import Sheet
from .rows import ROW_POSITION

@dataclass
class TabTable():
    """
    A tab parsed into its header and data rows.
    header: column names in column order, the order rows are written in.
    rows:   one dict per data row of column name to cell text, plus `row`,
            the 1-based position of the row in the tab.
    """
    header: list[str] = field(default_factory=list)
    rows: list[dict] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

def tab_name(tab: str|Sheet) -> str:
    if isinstance(tab, Sheet):
        return tab.title
    return str(tab)

def load_tab_table(tab: Sheet|dict, key_name: str = 'id') -> TabTable:
    """
    Loads the grid data of a tab into a header and data rows.

    The header is row 1, read left to right until the first cell without a
    value, so columns past a gap are ignored.  Data collection stops at the
    first row with nothing in any header column (tabs are often padded out
    with thousands of empty rows) or at the end of the grid.

    tab:        Sheet read with grid data.
    key_name:   Key column every data row must have a value in.
    """
    sheet = Sheet.build(tab)
    result = TabTable()
    grid = sheet.rows
    if len(grid) < 1:
        return result

    for cell in grid[0].values:
        if not cell.formattedValue:
            break
        result.header.append(cell.formattedValue)

    for index in range(1, len(grid)):
        cells = grid[index].values
        row = {ROW_POSITION: index + 1}
        for col, name in enumerate(result.header):
            if col < len(cells) and cells[col].formattedValue:
                row[name] = cells[col].formattedValue

        # nothing but the position means we're past the data
        if len(row) == 1:
            break

        if not row.get(key_name):
            raise SheetError(f"Tab {sheet.title} row {index + 1} has no key column '{key_name}'")
        result.rows.append(row)
    return result
