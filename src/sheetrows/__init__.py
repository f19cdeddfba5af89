"""
Use a Google spreadsheet as a small database.

Each tab of the spreadsheet is a table: the first row is the header and every
row below it, up to the first blank row, is a record.  Tabs are read into
typed records (RowModel dataclasses) and written back one row at a time
through the Sheets REST api.

Python dataclasses are used for the REST resource structs and most of the
logic is translating between those, the raw dicts and cell text.
"""
from .errors import SheetError
from .config import SheetRowsSettings
from .access import SheetsAccess, gws
