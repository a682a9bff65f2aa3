class ParseError(ValueError):
    """Raised when a value cannot be read as an exact base-10 number."""
