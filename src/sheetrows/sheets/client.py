from typing import Any, Self
from urllib.parse import quote

from loguru import logger

from ..access import gws
from ..errors import SheetError
from .a1 import SheetsA1
from .indexer import load_tab_table, tab_name
from .resources import (AppendValuesResponse, GoogleSheetsEnum, Sheet,
                        Spreadsheet, UpdateValuesResponse, ValueRange)
from .transport import HttpxTransport, Transport, parse_response

API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"

class SheetClient():
    """
    REST access to a single spreadsheet document.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values
    Every call goes through request() which adds the api key and turns an
    unsuccessful response into a SheetError.  Writes always send RAW values,
    callers are expected to hand over already encoded cell text.
    """
    def __init__(self, transport: Transport, api_key: str, spreadsheet_id: str,
                 base_url: str = API_BASE) -> None:
        self.transport = transport
        self.api_key = quote(str(api_key), safe='')
        self.spreadsheet_id = quote(str(spreadsheet_id), safe='')
        self.base_url = base_url.rstrip('/')

    @classmethod
    def from_settings(cls, settings, transport: Transport|None = None) -> Self:
        """
        Build a client from SheetRowsSettings.  Without a transport an
        HttpxTransport is made, authorized by the module access session.
        """
        if transport is None:
            gws.config = settings.access_config()
            transport = HttpxTransport(session=gws, timeout=settings.timeout)
        return cls(transport, settings.api_key, settings.spreadsheet_id, settings.base_url)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self) -> None:
        await self.transport.close()

    def __repr__(self) -> str:
        return f"{self.__class__}:{self.spreadsheet_id}"

    def url(self, api: str = "") -> str:
        key = ('&' if '?' in api else '?') + f"key={self.api_key}"
        return f"{self.base_url}/{self.spreadsheet_id}{api}{key}"

    @staticmethod
    def _values_api(tab: str|Sheet, row: int, suffix: str = "") -> str:
        a1 = SheetsA1.row_range(tab_name(tab), row)
        return f"/values/{quote(a1, safe='!:')}{suffix}"

    async def request(self, method: str, api: str = "", body: Any = None) -> Any:
        """
        Send a request for this spreadsheet and return the decoded response.
        api is the path and query after the spreadsheet id.
        """
        logger.debug("sheets {} {}{}", method, self.spreadsheet_id, api)
        raw = await self.transport.raw_request(method, self.url(api), body)
        response = parse_response(raw)
        if not raw.ok:
            message = response
            error = response.get('error') if isinstance(response, dict) else None
            if isinstance(error, dict):
                message = error.get('message', response)
            logger.warning("sheets {} {} failed with {}", method, api, raw.status_code)
            raise SheetError(f"{method} {api} failed ({raw.status_code}): {message}", response)
        return response

    async def read(self) -> Spreadsheet:
        """
        Retrieve the entire document including the grid data of every tab.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
        """
        response = await self.request('GET', '?includeGridData=true')
        return Spreadsheet.build(response)

    async def index(self, doc: Spreadsheet|dict|None = None, key_name: str = 'id') -> Spreadsheet:
        """
        Parse every tab of the document into doc.tabs, keyed by tab title.
        The document is read first if one isn't supplied.
        """
        if doc is None:
            doc = await self.read()
        doc = Spreadsheet.build(doc)
        doc.tabs = {}
        for tab in doc.sheets:
            doc.tabs[tab.title] = load_tab_table(tab, key_name)
        logger.debug("indexed {} tabs of {}", len(doc.tabs), doc.spreadsheetId)
        return doc

    async def get_row(self, tab: str|Sheet, row: int) -> list[list]:
        """
        Get the values from a row to the end of the tab.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/get
        """
        if not row:
            raise SheetError('row cannot be zero')
        response = await self.request('GET', self._values_api(tab, row))
        return ValueRange.build(response).values

    async def update_row(self, tab: str|Sheet, row: int, values: list[str]) -> UpdateValuesResponse:
        """
        Overwrite a row of a tab with the provided values.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/update

        tab:    name or sheet
        row:    1-based position of row
        values: encoded cell text in column order
        """
        options = f"valueInputOption={GoogleSheetsEnum.valueInputOption('RAW')}&includeValuesInResponse=true"
        body = {'values': [list(values)]}
        response = await self.request('PUT', self._values_api(tab, row, f"?{options}"), body)
        return UpdateValuesResponse.build(response)

    async def append_row(self, tab: str|Sheet, row: int, values: list[str]) -> AppendValuesResponse:
        """
        Insert a row into a tab after the table found at the given position.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/append
        Row 0 (an empty table) anchors at the header row.

        tab:    name or sheet
        row:    1-based position to append from
        values: encoded cell text in column order
        """
        name = tab_name(tab)
        options = (f"valueInputOption={GoogleSheetsEnum.valueInputOption('RAW')}"
                   f"&insertDataOption={GoogleSheetsEnum.insertDataOption('INSERT_ROWS')}"
                   "&includeValuesInResponse=true")
        body = {'values': [list(values)]}
        api = self._values_api(name, max(int(row), 1), f":append?{options}")
        response = AppendValuesResponse.build(await self.request('POST', api, body))
        if not response:
            raise SheetError(f"Couldn't update {name} row {row}", response.to_base())
        return response
