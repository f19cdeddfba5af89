"""
A spreadsheet's tabs as tables of typed rows
"""

from .codec import NIL, NO_DATE, ColumnType, encode, decode
from .a1 import SheetsA1
from .resources import (GoogleSheetsEnum, SheetsResource, SpreadsheetProperties,
                        GridProperties, SheetProperties, CellData, RowData, GridData,
                        Sheet, Spreadsheet, ValueRange, UpdateValuesResponse,
                        AppendValuesResponse)
from .rows import ROW_POSITION, RowModel
from .indexer import TabTable, load_tab_table, tab_name
from .transport import Transport, HttpxTransport, RawResponse, parse_response
from .client import API_BASE, SheetClient
from .store import RowStore
from .spreadsheet import SheetDatabase
