"""Fatal error types raised while loading datasets or the search index"""


class TimelordError(Exception):
    """Base class for errors that abort the whole run"""


class DatasetError(TimelordError):
    """A reference dataset is missing or malformed"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load dataset {path}: {reason}")


class IndexLoadError(TimelordError):
    """The persisted city index cannot be opened"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open city index {path}: {reason}")
