"""gitfast: find and score GitHub users located in Uganda."""

__version__ = "1.0.0"
