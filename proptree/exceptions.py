# proptree/exceptions.py
"""
proptree.exceptions
-------------------

Custom exceptions for proptree.
"""


class PropertiesError(Exception):
    """
    Base class for all proptree errors.
    """


class ParseError(PropertiesError):
    """
    Raised when a properties stream cannot be turned into a document.
    """


class MalformedEntryError(ParseError):
    """
    Raised when a significant line has no '=' separator.
    """

    def __init__(self, line, line_number=None):
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"Malformed property entry{where} (no '=' separator): {line.strip()!r}")
        self.line = line
        self.line_number = line_number
