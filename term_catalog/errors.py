from __future__ import annotations


class TermCatalogError(Exception):
    """
    Base error for term discovery and subject fetching.
    """

    pass


class ParseError(TermCatalogError):
    """
    The page could not be interpreted as a form.
    """

    def __init__(self, url: str, reason: str = "no usable form found"):
        self.url = url
        super().__init__(f"{reason}: {url}")


class NotFoundError(TermCatalogError):
    """
    The term selector is missing from the form.
    """

    def __init__(self, url: str, field_name: str):
        self.url = url
        self.field_name = field_name
        super().__init__(f"field {field_name!r} not found on form at {url}")


class FetchError(TermCatalogError):
    def __init__(self, url: str, term_id: str | None = None, reason: str = "fetch failed"):
        self.url = url
        self.term_id = term_id
        if term_id is None:
            message = f"{reason}: {url}"
        else:
            message = f"{reason} for term {term_id}: {url}"
        super().__init__(message)
