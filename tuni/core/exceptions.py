#!/usr/bin/env python3

"""
Custom exceptions for transcript unification.

Provides specific exception types for better error handling and debugging.
"""


class TuniError(Exception):
    """Base exception for all tuni errors."""
    pass


class ParseError(TuniError):
    """Error occurred while reading a GTF/GFF line."""

    def __init__(self, message: str, filename: str = "", line_number: int = 0):
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Parse error in {self.filename}: {super().__str__()}"
        return super().__str__()


class MissingIdentifierError(ParseError):
    """An exon/CDS line does not carry a transcript_id attribute."""

    def __init__(self, line: str, filename: str = "", line_number: int = 0):
        super().__init__(f"No transcript_id found in line {line!r}", filename, line_number)
        self.line = line


class MalformedLineError(ParseError):
    """A non-comment line does not have the 9 GTF/GFF columns."""

    def __init__(self, line: str, filename: str = "", line_number: int = 0):
        column_count = len(line.split('\t'))
        super().__init__(f"Expected 9 tab-separated columns, found {column_count} in line {line!r}",
                         filename, line_number)
        self.line = line


class UnknownFeatureKindError(TuniError):
    """
    A boundary was inserted for a feature other than "exon" or "CDS".

    Only exon/CDS lines reach signature building, so this points to a bug
    in line filtering rather than to bad input.
    """

    def __init__(self, feature: str):
        super().__init__(f"Feature must be 'exon' or 'CDS', found {feature!r}")
        self.feature = feature


class UnknownDialectError(TuniError):
    """
    The output dialect is neither "gtf" nor "gff".

    Extensions are checked while validating inputs, so this points to a bug
    in input validation.
    """

    def __init__(self, dialect: str):
        super().__init__(f"Dialect must be 'gtf' or 'gff', found {dialect!r}")
        self.dialect = dialect


class UnifierStateError(TuniError):
    """The unifier was used out of order (merge, then label, then resolve)."""
    pass


class FileAccessError(TuniError):
    """A file could not be read, created or written."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = str(path)

    def __str__(self):
        if self.path:
            return f"{super().__str__()} {self.path!r}"
        return super().__str__()


class InputValidationError(TuniError):
    """Command line inputs are unusable."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = str(path)

    def __str__(self):
        if self.path:
            return f"{super().__str__()}, found {self.path!r}"
        return super().__str__()


class ConfigurationError(TuniError):
    """Error in tuni configuration."""
    pass


class MemoryLimitError(TuniError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"
