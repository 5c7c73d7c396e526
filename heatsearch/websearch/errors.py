"""Exceptions raised by web search extraction and fetching."""


class WebSearchError(Exception):
    """Raised when a search cannot be fetched or extracted."""


class ParseFailure(WebSearchError):
    """Raised when response content cannot be interpreted as a document."""


class MissingContainer(WebSearchError):
    """Raised when a web results page lacks its primary results container."""

    def __init__(self, selector: str):
        super().__init__(f"missing results container: {selector}")
        self.selector = selector
