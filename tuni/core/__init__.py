#!/usr/bin/env python3

"""
Core module for transcript unification.

Contains the transcript signature data structures, exception types,
configuration management and the parsing, unification and rewriting steps.
"""

from .data_structures import SampleKey, TranscriptSignature, SignatureBuilder, TranscriptRecord
from .exceptions import (
    TuniError, ParseError, MissingIdentifierError, MalformedLineError,
    UnknownFeatureKindError, UnknownDialectError, UnifierStateError,
    FileAccessError, InputValidationError, ConfigurationError, MemoryLimitError
)
from .config import UnifierConfig, load_config

__all__ = [
    'SampleKey', 'TranscriptSignature', 'SignatureBuilder', 'TranscriptRecord',
    'TuniError', 'ParseError', 'MissingIdentifierError', 'MalformedLineError',
    'UnknownFeatureKindError', 'UnknownDialectError', 'UnifierStateError',
    'FileAccessError', 'InputValidationError', 'ConfigurationError', 'MemoryLimitError',
    'UnifierConfig', 'load_config'
]
