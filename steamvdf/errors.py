class VdfError(Exception):
    """Base class for steamvdf errors."""


# Format/structure related
class FormatError(VdfError):
    """A byte stream does not follow the format.

    ``record`` holds the fields parsed before the failure (the partial
    record), ``records`` holds the records of the document that were fully
    parsed before the failing one. Either may be None when the error was
    raised outside of that stage.
    """

    def __init__(self, message: str, *, record=None, records=None, offset=None):
        super().__init__(message)
        self.record = record
        self.records = records
        self.offset = offset


class MalformedHeader(FormatError):
    pass


class UnknownFieldType(FormatError):
    pass


class TruncatedField(FormatError):
    pass


class InvalidIdentifier(FormatError):
    pass


class UnsupportedFormatVersion(VdfError):
    pass


# Domain adapter
class FieldKindMismatch(VdfError):
    pass


# Steam installation
class SteamNotFound(VdfError):
    pass
