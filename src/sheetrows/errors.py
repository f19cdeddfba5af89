from typing import Any

class SheetError(Exception):
    """
    The one error raised by this package.  Faults are told apart by message.
    When the fault came back from the Sheets service the parsed response
    body is kept in `body`.
    """
    def __init__(self, message: Any = "", body: Any = None) -> None:
        if body is None and not isinstance(message, str):
            body = message
        super().__init__(str(message))
        self.body = body
