"""
Conversion between typed field values and the text stored in a cell.

Every value is written as text with valueInputOption=RAW so the sheet holds
exactly what encode() produced.  Absent values are written as the NIL
sentinel rather than an empty string so that a deliberately empty string
survives a round trip.  Reading back needs to know what type to produce,
which comes from the column's declared ColumnType.
"""
import re
from datetime import date, datetime
from enum import Enum
from typing import Any

from ..errors import SheetError

# written for None and the unset date placeholder
NIL = '\0'

# placeholder for a date field that has not been set
NO_DATE = datetime.min

_INT_RE = re.compile(r"^([+-]?[1-9]\d*|0)$")

_TRUE_VALUES = ('true', 't', 'yes', 'y', '1')
_FALSE_VALUES = ('false', 'f', 'no', 'n', '0')

class ColumnType(Enum):
    """How a column's cell text is coerced on the way back in"""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"

def encode(value: Any) -> str:
    """Convert a value to the text written to its cell"""
    if value is None:
        return NIL
    if isinstance(value, (date, datetime)):
        if value == NO_DATE:
            return NIL
        return value.isoformat()
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)

def parse_bool(value: Any, default: bool = False) -> bool:
    """
    Permissive boolean parsing, anything not recognizably true or false
    gives the default.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    v = str(value).strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    return default

def parse_number(value: Any) -> int|float:
    """Integers for strict sign+digits text, floats for anything else"""
    text = str(value).strip()
    if _INT_RE.match(text):
        return int(text)
    return float(text)

def parse_date(value: str) -> date|datetime:
    """ISO text, a date for date-only text and a datetime otherwise"""
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    return datetime.fromisoformat(text)

def infer_type(current: Any) -> ColumnType|None:
    """
    Work out a column type from a value already held in the field.
    This is how untyped columns are decoded.  It is only as good as the
    value it is given: a None or an int in a float field decodes wrongly,
    which is why record types declare their column types instead.
    """
    if isinstance(current, bool):
        return ColumnType.BOOLEAN
    if isinstance(current, int):
        return ColumnType.INTEGER
    if isinstance(current, float):
        return ColumnType.FLOAT
    if isinstance(current, (date, datetime)):
        return ColumnType.DATE
    if isinstance(current, str):
        return ColumnType.STRING
    return None

def decode(column_type: ColumnType|None, text: Any) -> Any:
    """
    Convert cell text back to a typed value for a column.
    Empty text and NIL decode to None.  Values that are already typed pass
    through untouched, as they do when a record is assigned from Python
    values rather than cell text.
    """
    if text is None:
        return None
    if not isinstance(text, str):
        if column_type is ColumnType.FLOAT and isinstance(text, int) and not isinstance(text, bool):
            return float(text)
        return text
    if not text or text == NIL:
        return None
    try:
        match column_type:
            case ColumnType.INTEGER:
                return parse_number(text)
            case ColumnType.FLOAT:
                return float(text)
            case ColumnType.BOOLEAN:
                return parse_bool(text, False)
            case ColumnType.DATE:
                return parse_date(text)
            case _:
                return text
    except ValueError as e:
        raise SheetError(f"cannot read {text!r} as {column_type.value}") from e
