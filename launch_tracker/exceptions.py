"""
Import errors raised by the Launch Tracker pipeline
"""


class ShotImportError(Exception):
    """Base class for every import failure"""


class UnreadableFileError(ShotImportError):
    """Bytes could not be read as an xlsx, xls or csv file"""


class EmptySheetError(ShotImportError):
    """The workbook has no non-empty rows"""


class NoUsableRowsError(ShotImportError):
    """Neither the header mapping nor the fallback parser produced usable shots"""

    def __init__(self, expected_columns):
        self.expected_columns = list(expected_columns)
        super().__init__(
            "No usable shot rows found. Expected columns such as: "
            + ", ".join(self.expected_columns)
        )
