"""
Class implementations of the Sheets REST resources this package reads and writes.
As these are just logical groupings of data fields we use dataclasses
to implement.  dataclasses.asdict() gives the dict the REST body needs
but there's no inverse, so nested resources convert their dict members in
fixup() and everything is constructed through build(), which drops any
keys the service sends that we don't model.
Only the resources needed to read a whole document and write value ranges
are implemented.
"""
from collections.abc import Mapping
from dataclasses import dataclass, field, asdict, fields
from typing import List, Self

from ..resources import SheetResourceBase

class SheetsResource(SheetResourceBase):
    """Adds tolerant construction from a raw response dict."""

    @classmethod
    def build(cls, values: Self|dict|None = None) -> Self:
        """Construct from a response dict, anything that isn't one gives the empty resource"""
        if isinstance(values, cls):
            return values
        if not isinstance(values, Mapping):
            values = {}
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in names})

class GoogleSheetsEnum():
    """
    An 'enum' in the sheets REST api is just a string so this is
    just to translate and validate input.
    """
    _VALID_VALUE_INPUT_OPTIONS = {
        "RAW": "RAW",
        "USER": "USER_ENTERED",
        "USER_ENTERED": "USER_ENTERED"
    }
    _VALID_INSERT_DATA_OPTIONS = {
        "INSERT": "INSERT_ROWS",
        "INSERT_ROWS": "INSERT_ROWS",
        "OVERWRITE": "OVERWRITE"
    }

    @classmethod
    def valueInputOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/ValueInputOption"""
        return cls._VALID_VALUE_INPUT_OPTIONS.get(str(option).upper(), "")

    @classmethod
    def insertDataOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append#InsertDataOption"""
        return cls._VALID_INSERT_DATA_OPTIONS.get(str(option).upper(), "")

@dataclass
class SpreadsheetProperties(SheetsResource):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#SpreadsheetProperties
    """
    title: str = field(default="")
    locale: str = field(default="")
    autoRecalc: str = field(default="")
    timeZone: str = field(default="")

    def __bool__(self) -> bool:
        return bool(self.title)

@dataclass
class GridProperties(SheetsResource):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int = field(default=-1)
    columnCount: int = field(default=-1)
    frozenRowCount: int = field(default=0)
    frozenColumnCount: int = field(default=0)

    def __bool__(self) -> bool:
        return self.rowCount >= 0 and self.columnCount >= 0

@dataclass
class SheetProperties(SheetsResource):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int = field(default=-1)
    title: str = field(default="")
    index: int = field(default=-1)
    sheetType: str = field(default="")
    gridProperties: GridProperties|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.gridProperties = GridProperties.build(self.gridProperties)

    def __bool__(self) -> bool:
        """
        True if it is valid, which is the ID and index are 0 or positive
        as negative index is not possible
        """
        return self.sheetId >= 0 and self.index >= 0 and bool(self.title)

    def __str__(self) -> str:
        if not self:
            return "<invalid sheet>"
        val = f"{self.title}({self.sheetId}[{self.index}])"
        if self.gridProperties:
            val += f"({self.gridProperties.rowCount}Rx{self.gridProperties.columnCount}C)"
        return val

@dataclass
class CellData(SheetsResource):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#CellData
    Only formattedValue is consumed, the rest is carried for completeness.
    """
    userEnteredValue: dict = field(default_factory=dict)
    effectiveValue: dict = field(default_factory=dict)
    formattedValue: str = field(default="")
    userEnteredFormat: dict = field(default_factory=dict)
    effectiveFormat: dict = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.formattedValue)

@dataclass
class RowData(SheetsResource):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#RowData"""
    values: List[CellData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.values = [CellData.build(c) for c in self.values]

    def __len__(self) -> int:
        return len(self.values)

@dataclass
class GridData(SheetsResource):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#griddata"""
    startRow: int = field(default=0)
    startColumn: int = field(default=0)
    rowData: List[RowData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.rowData = [RowData.build(r) for r in self.rowData]

@dataclass
class Sheet(SheetsResource):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheet
    A single tab within a spreadsheet.  Grid data is only present when the
    document was read with includeGridData.
    """
    properties: SheetProperties|dict = field(default_factory=dict)
    data: List[GridData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SheetProperties.build(self.properties)
        self.data = [GridData.build(gd) for gd in self.data]

    @property
    def title(self) -> str:
        return self.properties.title

    @property
    def rows(self) -> list[RowData]:
        """Raw grid rows of the first data block, empty if no grid data was read"""
        if self.data:
            return self.data[0].rowData
        return []

    def __bool__(self) -> bool:
        return bool(self.properties)

    def __str__(self) -> str:
        return str(self.properties)

@dataclass
class Spreadsheet(SheetsResource):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#resource:-spreadsheet
    The representation of a spreadsheet document.  tabs is not part of the
    REST resource, it holds the parsed table of every tab by title once the
    document has been indexed.
    """
    spreadsheetId: str = field(default="")
    properties: SpreadsheetProperties|dict = field(default_factory=dict)
    sheets: List[Sheet|dict] = field(default_factory=list)
    spreadsheetUrl: str = field(default="")
    tabs: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = SpreadsheetProperties.build(self.properties)
        self.sheets = [Sheet.build(s) for s in self.sheets]

    def to_base(self) -> dict:
        self.fixup()
        b = {
            'spreadsheetId': self.spreadsheetId,
            'properties': self.properties.to_base(),
            'sheets': [s.to_base() for s in self.sheets],
            'spreadsheetUrl': self.spreadsheetUrl
        }
        return b

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def __str__(self) -> str:
        if not self.spreadsheetId:
            return 'unconnected'
        return f"{self.properties.title}[{','.join(str(s) for s in self.sheets)}]"

@dataclass
class ValueRange(SheetsResource):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values#resource:-valuerange"""
    range: str = field(default="")
    majorDimension: str = field(default="")
    values: list[list] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.range)

    @property
    def first(self) -> list:
        """The first row of values, or empty"""
        return self.values[0] if self.values else []

@dataclass
class UpdateValuesResponse(SheetsResource):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/UpdateValuesResponse
    """
    spreadsheetId: str = field(default="")
    updatedRange: str = field(default="")
    updatedRows: int = field(default=0)
    updatedColumns: int = field(default=0)
    updatedCells: int = field(default=0)
    updatedData: ValueRange|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.updatedData = ValueRange.build(self.updatedData)

    def __bool__(self) -> bool:
        return bool(self.updatedRange)

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['updatedData'] = self.updatedData.to_base()
        return b

@dataclass
class AppendValuesResponse(SheetsResource):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append#response-body
    """
    spreadsheetId: str = field(default="")
    tableRange: str = field(default="")
    updates: UpdateValuesResponse|dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.updates = UpdateValuesResponse.build(self.updates)

    def __bool__(self) -> bool:
        """Only confirmed when the service reports the range it updated"""
        return bool(self.updates)

    def to_base(self) -> dict:
        self.fixup()
        b = {'spreadsheetId': self.spreadsheetId, 'tableRange': self.tableRange,
             'updates': self.updates.to_base()}
        return b
