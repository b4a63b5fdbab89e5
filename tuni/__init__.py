#!/usr/bin/env python3

"""
tuni: unify transcripts across different samples

Transcript assemblers name the same transcript differently in every sample.
tuni gives every structurally identical transcript (same chromosome, strand,
exon and CDS boundaries) one shared label across any number of GTF/GFFs.

Modules:
- core: Data structures, exceptions, configuration, parsing, unification
  and output rewriting
- utils: Performance monitoring
- tests: Unit and integration tests
"""

__version__ = "0.1.0"

# Import main components for easy access
from .core.data_structures import SampleKey, TranscriptSignature, TranscriptRecord
from .core.exceptions import (
    TuniError, ParseError, MissingIdentifierError, MalformedLineError,
    UnknownFeatureKindError, UnknownDialectError, UnifierStateError,
    FileAccessError, InputValidationError, ConfigurationError, MemoryLimitError
)
from .core.config import UnifierConfig, load_config
from .core.parsers import SignatureAccumulator, accumulate, extract, find_transcript_id, is_qualifying
from .core.processors import TranscriptUnifier
from .core.generators import OutputRewriter, rewrite
from .core.pipeline import TranscriptUnificationPipeline, UnificationSummary

__all__ = [
    # Main pipeline
    'TranscriptUnificationPipeline', 'UnificationSummary',
    # Steps
    'SignatureAccumulator', 'accumulate', 'extract', 'find_transcript_id', 'is_qualifying',
    'TranscriptUnifier', 'OutputRewriter', 'rewrite',
    # Data structures
    'SampleKey', 'TranscriptSignature', 'TranscriptRecord',
    # Exceptions
    'TuniError', 'ParseError', 'MissingIdentifierError', 'MalformedLineError',
    'UnknownFeatureKindError', 'UnknownDialectError', 'UnifierStateError',
    'FileAccessError', 'InputValidationError', 'ConfigurationError', 'MemoryLimitError',
    # Configuration
    'UnifierConfig', 'load_config'
]
