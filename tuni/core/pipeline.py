#!/usr/bin/env python3

"""
Main pipeline class for transcript unification.

Runs the two passes over the input GTF/GFFs: signatures are collected from
every file and merged, labels are assigned once, then every file is
re-streamed with its unified labels.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from .config import UnifierConfig
from .exceptions import FileAccessError, InputValidationError, TuniError, UnknownDialectError
from .generators import DIALECTS, OutputRewriter, RewriteStats
from .parsers import SignatureAccumulator
from .processors import TranscriptUnifier
from ..utils.performance_monitor import PerformanceMonitor

PathLike = Union[str, Path]

REPORT_FILE_NAME = "tuni_report.txt"


def open_gtf_gff(gtf_gff_path: PathLike, mode: str = 'r'):
    """
    Open a GTF/GFF as UTF-8 without newline translation.

    Lines split on "\\n" only, so a stray "\\r" inside a column stays part of
    its line; strip_line_ending removes "\\n" and "\\r\\n".
    """
    return open(gtf_gff_path, mode, encoding='utf-8', newline='\n')


def sample_name(gtf_gff_path: PathLike) -> str:
    """Isolate the GTF/GFF file name: "/path/to/a.gtf" -> "a.gtf"."""
    return Path(gtf_gff_path).name


def dialect_for_path(gtf_gff_path: PathLike) -> str:
    """Get the dialect ("gtf" or "gff") from the file extension."""
    extension = Path(gtf_gff_path).suffix[1:]
    if extension not in DIALECTS:
        raise UnknownDialectError(extension)
    return extension


def output_path_for(gtf_gff_path: PathLike, output_dir: PathLike, output_tag: str = "tuni") -> Path:
    """"/path/to/a.gtf" -> "<output_dir>/a.tuni.gtf"."""
    gtf_gff_path = Path(gtf_gff_path)
    return Path(output_dir) / f"{gtf_gff_path.stem}.{output_tag}{gtf_gff_path.suffix}"


@dataclass
class UnificationSummary:
    """Outcome of one unification run."""
    inputs: List[Path] = field(default_factory=list)
    outputs: List[Path] = field(default_factory=list)
    transcript_count: int = 0
    label_count: int = 0
    rewrite_stats: Dict[str, RewriteStats] = field(default_factory=dict)

    @property
    def unresolved_count(self) -> int:
        return sum(stats.unresolved for stats in self.rewrite_stats.values())


class TranscriptUnificationPipeline:
    """Main pipeline class that coordinates both passes."""

    def __init__(self, config: Optional[UnifierConfig] = None):
        self.config = config or UnifierConfig()
        self.monitor = PerformanceMonitor(memory_limit_mb=self.config.memory_limit_mb)
        self.unifier: Optional[TranscriptUnifier] = None

    def run(self, gtf_gff_paths: Sequence[PathLike], output_dir: PathLike,
            dialect: Optional[str] = None) -> bool:
        """
        Run the complete unification, logging instead of raising.

        Returns:
            True if every file was unified and written
        """
        try:
            self.unify(gtf_gff_paths, output_dir, dialect)
            return True
        except TuniError as e:
            logging.error(f"Unification failed: {e}")
            return False
        except Exception as e:
            logging.error(f"Unification failed unexpectedly: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

    def unify(self, gtf_gff_paths: Sequence[PathLike], output_dir: PathLike,
              dialect: Optional[str] = None) -> UnificationSummary:
        """
        Unify transcripts across GTF/GFFs and write one labelled file per input.

        Args:
            gtf_gff_paths: Input GTF/GFFs, all of the same dialect
            output_dir: Existing directory for the "<stem>.tuni.<ext>" outputs
            dialect: "gtf" or "gff"; taken from the first file's extension if omitted

        Returns:
            UnificationSummary: inputs, outputs and counts

        Raises:
            TuniError: on the first fatal error; outputs already written are kept
        """
        paths = [Path(p) for p in gtf_gff_paths]
        if not paths:
            raise InputValidationError("At least one GTF/GFF is required")
        self._check_unique_samples(paths)
        dialect = dialect or dialect_for_path(paths[0])

        summary = UnificationSummary(inputs=paths)
        self.unifier = TranscriptUnifier(self.config.label_prefix)

        logging.info("Starting transcript unification")
        logging.info(f"Input files: {len(paths)} ({dialect.upper()})")
        logging.info(f"Output directory: {output_dir}")

        # Pass 1: every file must be merged before any label is assigned
        self._collect_signatures(paths)

        self._assign_labels()
        summary.transcript_count = self.unifier.sample_key_count
        summary.label_count = self.unifier.group_count

        # Pass 2: labels are final, rewrite every file
        self._rewrite_outputs(paths, Path(output_dir), dialect, summary)

        if summary.unresolved_count:
            logging.warning(f"{summary.unresolved_count} lines had a transcript_id without a unified label")
        logging.info("Unification completed successfully")
        self.monitor.log_performance_report()

        if self.config.generate_reports:
            self._generate_final_report(Path(output_dir), summary)

        return summary

    def _check_unique_samples(self, paths: List[Path]) -> None:
        """Sample names are file names, so they must not repeat."""
        seen = set()
        for path in paths:
            name = sample_name(path)
            if name in seen:
                raise InputValidationError("GTF/GFF file names must be unique", str(path))
            seen.add(name)

    def _collect_signatures(self, paths: List[Path]) -> None:
        """Read every input and merge its signatures into the unifier."""
        with self.monitor.phase_context("signature_collection") as metrics:
            for path in paths:
                logging.info(f"Reading {path}")
                name = sample_name(path)
                accumulator = SignatureAccumulator(name, self.config.intern_strings)

                try:
                    with open_gtf_gff(path) as handle:
                        transcripts = accumulator.accumulate(handle)
                except (OSError, UnicodeDecodeError) as e:
                    raise FileAccessError("Unable to read file", str(path)) from e

                self.unifier.merge(name, transcripts)
                metrics.operations_count += accumulator.line_count

                if self.config.enable_memory_monitoring:
                    self.monitor.check_memory_limit()

    def _assign_labels(self) -> None:
        with self.monitor.phase_context("label_assignment") as metrics:
            self.unifier.finalize_labels()
            metrics.operations_count = self.unifier.sample_key_count

    def _rewrite_outputs(self, paths: List[Path], output_dir: Path, dialect: str,
                         summary: UnificationSummary) -> None:
        """Write "<stem>.tuni.<ext>" for every input."""
        with self.monitor.phase_context("output_rewrite") as metrics:
            for path in paths:
                output_path = output_path_for(path, output_dir, self.config.output_tag)
                logging.info(f"Writing {output_path}")

                stats = self._rewrite_file(path, output_path, dialect)
                summary.outputs.append(output_path)
                summary.rewrite_stats[sample_name(path)] = stats
                metrics.operations_count += stats.lines

                logging.info(f"Labelled {stats.labelled}/{stats.lines} lines of {sample_name(path)}")

    def _rewrite_file(self, path: Path, output_path: Path, dialect: str) -> RewriteStats:
        rewriter = OutputRewriter(self.unifier, dialect, self.config.label_attribute)
        name = sample_name(path)

        try:
            reader = open_gtf_gff(path)
        except OSError as e:
            raise FileAccessError("Unable to read file", str(path)) from e

        with reader:
            try:
                writer = open_gtf_gff(output_path, 'w')
            except OSError as e:
                raise FileAccessError("Unable to create output file", str(output_path)) from e

            with writer:
                lines = rewriter.rewrite(reader, name)
                while True:
                    try:
                        line = next(lines)
                    except StopIteration:
                        break
                    except (OSError, UnicodeDecodeError) as e:
                        raise FileAccessError("Unable to read file", str(path)) from e

                    try:
                        writer.write(line + '\n')
                    except OSError as e:
                        raise FileAccessError("Unable to write line to", str(output_path)) from e

        return rewriter.stats

    def _generate_final_report(self, output_dir: Path, summary: UnificationSummary) -> None:
        """Write a plain-text processing report."""
        report_file = output_dir / REPORT_FILE_NAME
        performance = self.monitor.get_performance_summary()

        try:
            with open(report_file, 'w') as f:
                f.write("tuni - Processing Report\n")
                f.write("=" * 50 + "\n\n")

                f.write("INPUT STATISTICS\n")
                f.write("-" * 20 + "\n")
                f.write(f"Input files: {len(summary.inputs)}\n")
                f.write(f"Transcripts: {summary.transcript_count:,}\n")
                f.write(f"Unified labels: {summary.label_count:,}\n\n")

                f.write("OUTPUT FILES\n")
                f.write("-" * 20 + "\n")
                for input_path, output_path in zip(summary.inputs, summary.outputs):
                    stats = summary.rewrite_stats[sample_name(input_path)]
                    f.write(f"{input_path} -> {output_path}: {stats.labelled:,} labelled, "
                            f"{stats.unresolved:,} unresolved, {stats.lines:,} lines\n")
                f.write("\n")

                f.write("PERFORMANCE METRICS\n")
                f.write("-" * 20 + "\n")
                f.write(f"Total processing time: {performance['total_elapsed_time']:.2f} seconds\n")
                f.write(f"Peak memory usage: {performance['peak_memory_mb']:.1f} MB\n\n")

                if performance['phases']:
                    f.write("PHASE BREAKDOWN\n")
                    f.write("-" * 20 + "\n")
                    for phase_name, phase_data in performance['phases'].items():
                        f.write(f"{phase_name}: {phase_data['elapsed_time']:.2f}s ")
                        f.write(f"({phase_data['operations_count']} operations)\n")

                f.write("\nConfiguration used:\n")
                for key, value in self.config.to_dict().items():
                    f.write(f"  {key}: {value}\n")

            logging.info(f"Generated processing report: {report_file}")

        except OSError as e:
            logging.warning(f"Failed to generate processing report: {e}")
