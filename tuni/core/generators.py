#!/usr/bin/env python3

"""
Output generation: GTF/GFF lines rewritten with unified transcript labels.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from .data_structures import SampleKey
from .exceptions import UnknownDialectError
from .parsers import find_transcript_id, is_comment, strip_line_ending
from .processors import TranscriptUnifier

GTF = "gtf"
GFF = "gff"
DIALECTS = (GTF, GFF)
DEFAULT_LABEL_ATTRIBUTE = "tuni_id"


class LabelFormatter:
    """Format the unified label attribute for a GTF or GFF file."""

    def __init__(self, dialect: str, attribute: str = DEFAULT_LABEL_ATTRIBUTE):
        if dialect not in DIALECTS:
            raise UnknownDialectError(dialect)
        self.dialect = dialect
        self.attribute = attribute

    def format(self, unified_id: str) -> str:
        if self.dialect == GTF:
            return f' {self.attribute} "{unified_id}";'
        return f' {self.attribute}={unified_id};'


@dataclass
class RewriteStats:
    """Line counts for one rewritten file."""
    lines: int = 0
    labelled: int = 0
    unresolved: int = 0


class OutputRewriter:
    """
    Re-stream a GTF/GFF file, appending the unified label to every line
    whose transcript_id resolves.

    Any feature carrying a transcript_id is eligible (e.g. "transcript"
    lines), not only exon/CDS. Lines whose transcript_id has no label are
    written unchanged and logged as a warning, once per line.
    """

    def __init__(self, unifier: TranscriptUnifier, dialect: str,
                 attribute: str = DEFAULT_LABEL_ATTRIBUTE):
        self.unifier = unifier
        self.formatter = LabelFormatter(dialect, attribute)
        self.stats = RewriteStats()

    def rewrite_line(self, line: str, sample_name: str) -> str:
        """Rewrite a single line (without its line ending)."""
        self.stats.lines += 1
        if not line or is_comment(line):
            return line

        transcript_id = find_transcript_id(line.split('\t'))
        if transcript_id is None:
            return line

        unified_id = self.unifier.resolve(SampleKey(sample_name, transcript_id))
        if unified_id is None:
            self.stats.unresolved += 1
            logging.warning(f"Unrecognised transcript ID found in {sample_name}: {transcript_id.strip()}")
            return line

        self.stats.labelled += 1
        return line + self.formatter.format(unified_id)

    def rewrite(self, lines: Iterable[str], sample_name: str) -> Iterator[str]:
        """Yield rewritten lines, without line endings, in input order."""
        for line in lines:
            yield self.rewrite_line(strip_line_ending(line), sample_name)


def rewrite(lines: Iterable[str], sample_name: str, unifier: TranscriptUnifier,
            dialect: str, attribute: Optional[str] = None) -> Iterator[str]:
    """Shortcut for OutputRewriter(unifier, dialect).rewrite(lines, sample_name)."""
    rewriter = OutputRewriter(unifier, dialect, attribute or DEFAULT_LABEL_ATTRIBUTE)
    return rewriter.rewrite(lines, sample_name)
