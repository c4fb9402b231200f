"""Exceptions raised while loading fixtures."""


class FixtureError(Exception):
    """Base exception for fixture loading errors."""

    pass


class MalformedTableName(FixtureError, ValueError):
    """Raised when a table name has more than one schema separator."""

    def __init__(self, table: str):
        self.table = table
        super().__init__(f"Table name {table!r} has more than one schema separator")


class EmptyTableName(FixtureError, ValueError):
    """Raised when a fixture row names no table."""

    def __init__(self):
        super().__init__("Table name is empty")


class InvalidFixtureError(FixtureError, ValueError):
    """Raised when a fixture document or row does not have the expected shape."""

    pass


class AmbiguousPrimaryKeyError(FixtureError):
    """Raised when a primary key matches more than one existing row."""

    def __init__(self, table: str, count: int):
        self.table = table
        self.count = count
        super().__init__(
            f"Primary key matched {count} rows in {table!r}, expected at most one"
        )


class RowProcessingError(FixtureError):
    """Raised when a fixture row fails; carries the 1-based row position."""

    def __init__(self, row: int, cause: BaseException):
        self.row = row
        self.cause = cause
        super().__init__(f"Error loading row {row}: {cause}")


class FileError(FixtureError):
    """Raised when a fixture file cannot be read."""

    def __init__(self, filename: str, cause: BaseException):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Error loading file {filename}: {cause}")
