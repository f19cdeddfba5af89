from typing import Self

from .client import SheetClient
from .indexer import TabTable
from .resources import Sheet, Spreadsheet
from .rows import RowModel
from .store import RowStore

class SheetDatabase():
    """
    A spreadsheet used as a database: each tab is a table.
    Wraps the client and the indexed document so tables can be looked up by
    tab title and stores made for them.  Nothing is available until load().
    """
    def __init__(self, sheets: SheetClient, key_name: str = 'id') -> None:
        self.sheets = sheets
        self.key_name = key_name
        self._spreadsheet = Spreadsheet()

    @classmethod
    def from_settings(cls, settings, transport=None) -> Self:
        """A database over the configured spreadsheet, tabs keyed on settings.key_column"""
        return cls(SheetClient.from_settings(settings, transport), key_name=settings.key_column)

    def __bool__(self) -> bool:
        return bool(self._spreadsheet)

    def __str__(self) -> str:
        return str(self._spreadsheet)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __len__(self) -> int:
        """
        In this context length is the number of tabs in the spreadsheet.
        Or 0 if not loaded.
        """
        return len(self._spreadsheet.sheets)

    def __contains__(self, val: str|int) -> bool:
        """
        Is the tab in this spreadsheet?
        val can be either a string (title) or int (sheet ID)
        """
        return self.tab(val) is not None

    def __getitem__(self, title: str) -> TabTable:
        """The parsed table of a tab by title"""
        table = self._spreadsheet.tabs.get(title)
        if table is None:
            raise KeyError(f"{title} not in tabs")
        return table

    @property
    def id(self) -> str:
        return self._spreadsheet.spreadsheetId

    @property
    def spreadsheet(self) -> Spreadsheet:
        return self._spreadsheet

    @property
    def title(self) -> str:
        if self._spreadsheet:
            return self._spreadsheet.properties.title
        return 'unconnected'

    @property
    def url(self) -> str:
        return self._spreadsheet.spreadsheetUrl

    def tab(self, val: str|int) -> Sheet|None:
        """Tab by title or by sheet ID"""
        for s in self._spreadsheet.sheets:
            if isinstance(val, int) and s.properties.sheetId == val:
                return s
            if s.title == val:
                return s
        return None

    async def load(self, doc: Spreadsheet|dict|None = None) -> Spreadsheet:
        """Read (unless given) and index the whole document"""
        self._spreadsheet = await self.sheets.index(doc, self.key_name)
        return self._spreadsheet

    def store(self, title: str, row_type: type[RowModel], key_column: str|None = None) -> RowStore:
        """A store over the rows of a tab"""
        return RowStore(self.sheets, title, self[title], row_type, key_column)
