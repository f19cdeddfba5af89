import json
from dataclasses import dataclass
from typing import Any, ClassVar

import pytest

from sheetrows.sheets import ColumnType, RowModel, SheetClient
from sheetrows.sheets.transport import RawResponse, Transport

API_KEY = "test-key"
SHEET_ID = "sheet123"

@dataclass(frozen=True)
class Person(RowModel):
    columns: ClassVar[dict[str, ColumnType]] = {
        "id": ColumnType.STRING,
        "name": ColumnType.STRING,
    }
    id: str = ""
    name: str = ""

@dataclass(frozen=True)
class Item(RowModel):
    columns: ClassVar[dict[str, ColumnType]] = {
        "id": ColumnType.STRING,
        "count": ColumnType.INTEGER,
        "price": ColumnType.FLOAT,
        "active": ColumnType.BOOLEAN,
    }
    id: str = ""
    count: int|None = None
    price: float|None = None
    active: bool|None = None

class RecordingTransport(Transport):
    """Answers each request with the next queued response and records the call"""
    def __init__(self) -> None:
        self.calls = []
        self.responses = []
        self.closed = False

    def queue(self, body: Any, ok: bool = True, status_code: int = 200) -> None:
        text = body if isinstance(body, str) else json.dumps(body)
        self.responses.append(RawResponse(ok=ok, status_code=status_code, body=text.encode('utf-8')))

    async def raw_request(self, method: str, url: str, body: Any = None) -> RawResponse:
        self.calls.append((method, url, body))
        return self.responses.pop(0)

    async def close(self) -> None:
        self.closed = True

def make_tab(title: str, grid: list[list[str]], sheet_id: int = 0, index: int = 0) -> dict:
    """A tab as the service returns it with includeGridData"""
    return {
        "properties": {"sheetId": sheet_id, "title": title, "index": index, "sheetType": "GRID",
                       "gridProperties": {"rowCount": 1000, "columnCount": 26}},
        "data": [{"rowData": [{"values": [{"formattedValue": v} if v else {} for v in row]}
                              for row in grid]}]
    }

def make_doc(*tabs: dict) -> dict:
    return {
        "spreadsheetId": SHEET_ID,
        "properties": {"title": "Test Database", "locale": "en_US"},
        "sheets": list(tabs),
        "spreadsheetUrl": f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit"
    }

def update_response(title: str, row: int, values: list[str]) -> dict:
    """What values.update returns with includeValuesInResponse"""
    last = chr(ord('A') + len(values) - 1)
    rng = f"{title}!A{row}:{last}{row}"
    return {"spreadsheetId": SHEET_ID, "updatedRange": rng, "updatedRows": 1,
            "updatedColumns": len(values), "updatedCells": len(values),
            "updatedData": {"range": rng, "majorDimension": "ROWS", "values": [values]}}

def append_response(title: str, row: int, values: list[str]) -> dict:
    return {"spreadsheetId": SHEET_ID, "tableRange": f"{title}!A1:B{row - 1}",
            "updates": update_response(title, row, values)}

@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()

@pytest.fixture
def client(transport: RecordingTransport) -> SheetClient:
    return SheetClient(transport, API_KEY, SHEET_ID)
