from dataclasses import asdict

class SheetResourceBase():
    """
    Intended to be subclassed by a dataclass but isnt actually a dataclass.
    Resources are built straight from the decoded REST json so most of the
    work is translating nested dicts into the typed dataclasses (fixup) and
    back again (to_base).
    """
    def to_base(self) -> dict:
        """
        Default just return the dict representation of the object as needed by
        the REST body.  Something more complicated can override.
        Call fixup() first to ensure all fields are in correct format.
        """
        self.fixup()
        return asdict(self)

    def fixup(self) -> None:
        """
        notify a subclass to do any field adjustments
        """
        pass
