import re

class SheetsA1():
    """
    Helpers for the A1 range expressions used to address a tab's rows.
    See https://developers.google.com/sheets/api/guides/concepts#cell
    A general A1 has the form:

    <title>!<start col><start row>:<end col><end row>

    Rows are 1-based integers and columns are letters A-ZZZ.  Titles that are
    not plain words are wrapped in single quotes, with embedded quotes doubled.
    Rows are always written from column A through to `end` so a single range
    covers the whole record whatever the header width.
    """
    # enough of an A1 to pull the sheet and the bounds out of a service response
    _A1REGEXSTR = r"^\s*((?P<sheet>'(?:[^']|'')+'|[^'!]+)!)?(?P<start_col>[A-Z]{0,3})(?P<start_row>\d*)(:(?P<end_col>[A-Z]{0,3})(?P<end_row>\d*))?\s*$"
    _PLAINSHEETREGEXSTR = r"^[A-Za-z_][A-Za-z0-9_]*$"

    _a1_re = re.compile(_A1REGEXSTR)
    _plain_sheet_re = re.compile(_PLAINSHEETREGEXSTR)

    END = "end"

    @classmethod
    def quote_sheet(cls, title: str) -> str:
        """
        Quote a sheet title for use in a range if it needs it.
        Already quoted titles are passed through.
        """
        t = str(title)
        if len(t) > 1 and t[0] == "'" and t[-1] == "'":
            return t
        if cls._plain_sheet_re.match(t):
            return t
        return "'" + t.replace("'", "''") + "'"

    @classmethod
    def unquote_sheet(cls, title: str) -> str:
        t = str(title)
        if len(t) > 1 and t[0] == "'" and t[-1] == "'":
            return t[1:-1].replace("''", "'")
        return t

    @classmethod
    def row_range(cls, sheet: str, row: int) -> str:
        """
        Range for a whole row from column A to the end of the tab.
        """
        return f"{cls.quote_sheet(sheet)}!A{int(row)}:{cls.END}"

    @classmethod
    def extract(cls, a1: str) -> tuple[str,str,int,str,int]:
        """
        Take an A1 string and extract the various aspects.
        Missing aspects come back empty or 0.

        return: tuple of (title, start col, start row, end col, end row)
        """
        m = cls._a1_re.match(str(a1))
        if not m:
            return ("", "", 0, "", 0)
        sheet = cls.unquote_sheet(m.group('sheet')) if m.group('sheet') else ""
        sr = int(m.group('start_row')) if m.group('start_row') else 0
        er = int(m.group('end_row')) if m.group('end_row') else 0
        return (sheet, m.group('start_col') or "", sr, m.group('end_col') or "", er)

    @classmethod
    def range_row(cls, a1: str) -> int:
        """
        The 1-based starting row of a range such as the updatedRange in a
        write response, 0 if there isn't one.
        """
        return cls.extract(a1)[2]
