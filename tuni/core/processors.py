#!/usr/bin/env python3

"""
Cross-sample transcript unification.

Groups transcripts sharing a TranscriptSignature across any number of
GTF/GFF files and gives every group one unified label.
"""

import logging
from typing import Dict, FrozenSet, Iterator, Optional, Set, Tuple

from sortedcontainers import SortedDict

from .data_structures import SampleKey, TranscriptSignature
from .exceptions import UnifierStateError

DEFAULT_LABEL_PREFIX = "tuni_"


class TranscriptUnifier:
    """
    Holds the grouping and resolution maps of one run.

    Usage is strictly ordered: ``merge`` every file, ``finalize_labels`` once,
    then ``resolve``. Groups are kept sorted by signature, so labels depend
    only on the set of signatures seen, never on file order or hashing.
    """

    def __init__(self, label_prefix: str = DEFAULT_LABEL_PREFIX):
        self.label_prefix = label_prefix
        self._groups: SortedDict = SortedDict()
        self._seen: Set[SampleKey] = set()
        self._resolution: Dict[SampleKey, str] = {}
        self._labels: Dict[TranscriptSignature, str] = {}
        self._finalized = False

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def group_count(self) -> int:
        """Number of distinct signatures, i.e. unified labels."""
        return len(self._groups)

    @property
    def sample_key_count(self) -> int:
        """Number of transcript occurrences merged so far."""
        return len(self._seen)

    def merge(self, sample_name: str, transcripts: Dict[str, TranscriptSignature]) -> None:
        """
        Add one file's transcript signatures, emptying ``transcripts``.

        Raises:
            UnifierStateError: if labels were already assigned, or a
                (sample, transcript ID) pair was merged before.
        """
        if self._finalized:
            raise UnifierStateError(f"Cannot merge {sample_name} after labels were assigned")

        merged = 0
        while transcripts:
            transcript_id, signature = transcripts.popitem()
            sample_key = SampleKey(sample_name, transcript_id)
            if sample_key in self._seen:
                raise UnifierStateError(
                    f"Transcript {transcript_id} of sample {sample_name} was already merged")
            self._seen.add(sample_key)

            group = self._groups.get(signature)
            if group is None:
                group = self._groups[signature] = set()
            group.add(sample_key)
            merged += 1

        logging.info(f"Merged {merged} transcripts from {sample_name} "
                     f"({len(self._groups)} distinct signatures so far)")

    def finalize_labels(self) -> None:
        """
        Assign "<prefix><i>" to the i-th signature in sorted order.

        Raises:
            UnifierStateError: if called more than once.
        """
        if self._finalized:
            raise UnifierStateError("Labels have already been assigned")
        self._finalized = True

        for index, (signature, sample_keys) in enumerate(self._groups.items()):
            label = f"{self.label_prefix}{index}"
            self._labels[signature] = label
            for sample_key in sample_keys:
                self._resolution[sample_key] = label
            logging.debug(f"{label}: {len(sample_keys)} transcripts on "
                          f"{signature.chromosome}{signature.strand}")

        logging.info(f"Assigned {len(self._groups)} unified labels to "
                     f"{len(self._resolution)} transcripts")

    def resolve(self, sample_key: SampleKey) -> Optional[str]:
        """
        Get the unified label of a transcript, or None if it is unknown.

        Raises:
            UnifierStateError: if labels have not been assigned yet.
        """
        if not self._finalized:
            raise UnifierStateError("Labels must be assigned before resolving transcripts")
        return self._resolution.get(sample_key)

    def label_for(self, signature: TranscriptSignature) -> Optional[str]:
        """Get the unified label of a signature, or None if it is unknown."""
        if not self._finalized:
            raise UnifierStateError("Labels must be assigned before resolving transcripts")
        return self._labels.get(signature)

    def groups(self) -> Iterator[Tuple[str, TranscriptSignature, FrozenSet[SampleKey]]]:
        """Iterate (label, signature, sample keys) in label order."""
        if not self._finalized:
            raise UnifierStateError("Labels must be assigned before listing groups")
        for signature, sample_keys in self._groups.items():
            yield self._labels[signature], signature, frozenset(sample_keys)
