"""heatsearch - search-result extraction for scraped Google result pages."""

__version__ = "0.1.0"
