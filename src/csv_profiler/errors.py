from __future__ import annotations


class ProfilerError(Exception):
    """Base class for failures raised by csv_profiler."""


class IngestionError(ProfilerError):
    """The source could not be read or tokenised; no profile was produced."""


class DatasetTooLargeError(IngestionError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(
            f"Source is {size} bytes, above the configured limit of {limit} bytes "
            "(set CSV_PROFILER_MAX_FILE_BYTES to raise it)."
        )
        self.size = size
        self.limit = limit


class EmptyDatasetError(ProfilerError):
    """The source parsed cleanly but holds no data rows."""


class ArchiveNotFoundError(ProfilerError, FileNotFoundError):
    pass


class DegenerateColumnWarning(UserWarning):
    """
    A numeric column had no finite values; its statistics are all zero.

    This is a warning, not a failure: one bad column never aborts a profile.
    """
