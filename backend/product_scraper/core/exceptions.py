"""Custom exception classes for the application.

Expected scraping failures are returned as typed values (see
``product_scraper.scrapers.base``). Exceptions are reserved for faults that
must stop the service or a collaborator outright.
"""


class ProductScraperException(Exception):
    """Base exception for all product scraper errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(ProductScraperException):
    """Raised at startup when a credential or the site profile table is unusable."""

    def __init__(self, setting: str, message: str):
        self.setting = setting
        super().__init__(f"Invalid configuration for {setting}: {message}")


class GenerationError(ProductScraperException):
    """Raised when the text-generation service fails or times out."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"Generation error for {provider}: {message}")
