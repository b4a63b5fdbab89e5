#!/usr/bin/env python3

"""
GTF/GFF line parsing and per-file signature building.

Lines are consumed from any iterable of strings; opening files is left to
the caller.
"""

import logging
import sys
from typing import Dict, Iterable, List, Optional

from .data_structures import (
    BOUNDARY_FEATURES, SignatureBuilder, TranscriptRecord, TranscriptSignature
)
from .exceptions import MalformedLineError, MissingIdentifierError

GTF_GFF_COLUMNS = 9
TRANSCRIPT_ID_ATTRIBUTE = "transcript_id"


def strip_line_ending(line: str) -> str:
    """Remove a trailing "\\n" or "\\r\\n"."""
    if line.endswith('\n'):
        line = line[:-1]
        if line.endswith('\r'):
            line = line[:-1]
    return line


def is_comment(line: str) -> bool:
    return line.startswith('#')


def is_qualifying(fields: List[str]) -> bool:
    """Returns True if the split line is an exon or CDS."""
    return len(fields) >= GTF_GFF_COLUMNS and fields[2] in BOUNDARY_FEATURES


def find_transcript_id(fields: List[str]) -> Optional[str]:
    """
    Find the transcript ID attribute of a split line.

    Returns the first ";"-separated attribute whose stripped text starts with
    "transcript_id", exactly as written (e.g. ' transcript_id "A"'), or None.
    Relies on the attribute being named exactly "transcript_id", which holds
    for both GTF (transcript_id "A") and GFF (transcript_id=A).
    """
    if len(fields) < GTF_GFF_COLUMNS:
        return None
    for attribute in fields[8].split(';'):
        if attribute.strip().startswith(TRANSCRIPT_ID_ATTRIBUTE):
            return attribute
    return None


def extract(fields: List[str], filename: str = "", line_number: int = 0) -> TranscriptRecord:
    """
    Build a TranscriptRecord from a split exon/CDS line.

    Raises:
        MissingIdentifierError: if the line has no transcript_id attribute.
    """
    transcript_id = find_transcript_id(fields)
    if transcript_id is None:
        raise MissingIdentifierError('\t'.join(fields), filename, line_number)

    return TranscriptRecord(
        feature=fields[2],
        chromosome=fields[0],
        strand=fields[6],
        start=fields[3],
        end=fields[4],
        transcript_id=transcript_id,
    )


class SignatureAccumulator:
    """Build one TranscriptSignature per transcript ID of a GTF/GFF file."""

    def __init__(self, source_name: str = "", intern_strings: bool = True):
        self.source_name = source_name
        self.intern_strings = intern_strings
        self.line_count = 0
        self.record_count = 0

    def _intern(self, value: str) -> str:
        return sys.intern(value) if self.intern_strings else value

    def accumulate(self, lines: Iterable[str]) -> Dict[str, TranscriptSignature]:
        """
        Fold the exon/CDS lines of one file into signatures keyed by transcript ID.

        Chromosome and strand are taken from the first line seen for each
        transcript ID and never re-checked.

        Raises:
            MalformedLineError: a non-comment line has fewer than 9 columns.
            MissingIdentifierError: an exon/CDS line has no transcript_id.
        """
        builders: Dict[str, SignatureBuilder] = {}

        for line_number, line in enumerate(lines, 1):
            self.line_count += 1
            line = strip_line_ending(line)
            if not line or is_comment(line):
                continue

            fields = line.split('\t')
            if len(fields) < GTF_GFF_COLUMNS:
                raise MalformedLineError(line, self.source_name, line_number)

            if not is_qualifying(fields):
                continue

            record = extract(fields, self.source_name, line_number)
            self.record_count += 1

            builder = builders.get(record.transcript_id)
            if builder is None:
                builder = SignatureBuilder(
                    chromosome=self._intern(record.chromosome),
                    strand=self._intern(record.strand),
                )
                builders[self._intern(record.transcript_id)] = builder

            builder.insert_boundary(record.feature, self._intern(record.start))
            builder.insert_boundary(record.feature, self._intern(record.end))

        logging.info(f"Read {self.record_count} exon/CDS records for {len(builders)} transcripts"
                     f"{' from ' + self.source_name if self.source_name else ''}")

        return {transcript_id: builder.build() for transcript_id, builder in builders.items()}


def accumulate(lines: Iterable[str], source_name: str = "") -> Dict[str, TranscriptSignature]:
    """Shortcut for SignatureAccumulator(source_name).accumulate(lines)."""
    return SignatureAccumulator(source_name).accumulate(lines)
