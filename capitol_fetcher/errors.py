from __future__ import annotations


class FetcherError(RuntimeError):
    """Base class for every error raised by capitol_fetcher."""


class ValidationError(FetcherError, ValueError):
    """Filter values are malformed or contradict each other."""


class AcquisitionError(FetcherError):
    """
    Session launch, navigation or row wait failed.

    Retryable: the pipeline hands these to the retry loop.
    """

    def __init__(self, *, stage: str, url: str | None, cause: Exception):
        target = f" url={url}" if url else ""
        super().__init__(f"{stage} failed{target}: {cause}")
        self.stage = stage
        self.url = url
        self.__cause__ = cause


class ExtractionError(FetcherError):
    """Rows were present but could not be turned into records. Not retried."""


class FetchFailedError(FetcherError):
    def __init__(self, *, url: str, cause: Exception):
        super().__init__(f"fetch failed for {url}: {cause}")
        self.url = url
        self.__cause__ = cause
