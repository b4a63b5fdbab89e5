#!/usr/bin/env python3

"""
Core data structures for transcript unification.

Defines the structural identity of a transcript (its signature), the typed
record read from one annotation line, and the key under which every
transcript occurrence is resolved to a unified label.
"""

import functools
from dataclasses import dataclass, field
from typing import FrozenSet, NamedTuple, Set, Tuple

from .exceptions import UnknownFeatureKindError

EXON = "exon"
CDS = "CDS"
BOUNDARY_FEATURES = (EXON, CDS)


class SampleKey(NamedTuple):
    """A transcript occurrence: (sample name, transcript identifier)."""
    sample: str
    transcript_id: str


@functools.total_ordering
@dataclass(frozen=True)
class TranscriptSignature:
    """
    Everything needed to tell two transcripts apart.

    Both exon AND CDS boundaries take part so that transcripts sharing a
    coding region but differing in UTRs, or sharing UTRs but differing in
    coding region, stay distinct. Coordinates are kept as the literal strings
    from the file; only set membership and equality matter.

    Ordering compares chromosome, then strand, then the sorted exon
    boundaries, then the sorted CDS boundaries.
    """
    chromosome: str
    strand: str
    exon_boundaries: FrozenSet[str] = frozenset()
    cds_boundaries: FrozenSet[str] = frozenset()
    _sort_key: Tuple[str, str, Tuple[str, ...], Tuple[str, ...]] = field(
        init=False, repr=False, compare=False, hash=False)

    def __post_init__(self):
        # Computed once; SortedDict compares signatures on every insertion
        object.__setattr__(self, '_sort_key', (
            self.chromosome,
            self.strand,
            tuple(sorted(self.exon_boundaries)),
            tuple(sorted(self.cds_boundaries)),
        ))

    def sort_key(self) -> Tuple[str, str, Tuple[str, ...], Tuple[str, ...]]:
        return self._sort_key

    def __lt__(self, other: 'TranscriptSignature') -> bool:
        if not isinstance(other, TranscriptSignature):
            return NotImplemented
        return self._sort_key < other._sort_key


@dataclass
class SignatureBuilder:
    """In-progress signature for one transcript within one file."""
    chromosome: str
    strand: str
    exon_boundaries: Set[str] = field(default_factory=set)
    cds_boundaries: Set[str] = field(default_factory=set)

    def insert_boundary(self, feature: str, value: str) -> None:
        """Insert an exon/CDS boundary coordinate."""
        if feature == EXON:
            self.exon_boundaries.add(value)
        elif feature == CDS:
            self.cds_boundaries.add(value)
        else:
            raise UnknownFeatureKindError(feature)

    def build(self) -> TranscriptSignature:
        """Freeze into an immutable signature."""
        return TranscriptSignature(
            chromosome=self.chromosome,
            strand=self.strand,
            exon_boundaries=frozenset(self.exon_boundaries),
            cds_boundaries=frozenset(self.cds_boundaries),
        )


@dataclass(frozen=True)
class TranscriptRecord:
    """
    One exon/CDS line.

    ``transcript_id`` is the whole attribute substring as written in the line
    (e.g. ``transcript_id "A"``), so the rewrite pass can match the very same
    literal.
    """
    feature: str
    chromosome: str
    strand: str
    start: str
    end: str
    transcript_id: str
