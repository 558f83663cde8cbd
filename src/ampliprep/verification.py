from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Set

from Bio.SeqIO.QualityIO import FastqGeneralIterator
from rich.console import Console
from rich.table import Table

from ampliprep.logging_config import logger
from ampliprep.run import PreprocessingRun
from ampliprep.utils import count_lines


class PipelineCheckError(Exception):
    pass


class RecordCountMismatchError(PipelineCheckError):
    pass


class UnmappedSampleError(PipelineCheckError):
    pass


@dataclass
class CountReport:
    fwd_seqs: Path
    rev_seqs: Path
    fwd_lines: int
    rev_lines: int
    fwd_records: int
    rev_records: int

    @property
    def is_balanced(self) -> bool:
        return self.fwd_records == self.rev_records


def count_fastq_records(path: Path) -> int:
    with open(path, "r", encoding="utf-8") as in_handle:
        return sum(1 for _ in FastqGeneralIterator(in_handle))


def get_sample_id(title: str) -> str:
    # Demultiplexed read titles look like '<SampleID>_<n> <original title> ...'
    return title.split(None, 1)[0].rsplit("_", 1)[0]


def get_sample_ids(seqs_fastq: Path) -> Set[str]:
    with open(seqs_fastq, "r", encoding="utf-8") as in_handle:
        return {get_sample_id(title) for title, _, _ in FastqGeneralIterator(in_handle)}


def find_unmapped_samples(seqs_fastq: Path, sample_ids: Iterable[str]) -> Set[str]:
    return get_sample_ids(seqs_fastq) - set(sample_ids)


def compare_demultiplexed_counts(run: PreprocessingRun) -> CountReport:
    return CountReport(
        fwd_seqs=run.demux_fwd_seqs,
        rev_seqs=run.demux_rev_seqs,
        fwd_lines=count_lines(run.demux_fwd_seqs),
        rev_lines=count_lines(run.demux_rev_seqs),
        fwd_records=count_fastq_records(run.demux_fwd_seqs),
        rev_records=count_fastq_records(run.demux_rev_seqs),
    )


def print_count_report(report: CountReport, console: Console | None = None) -> None:
    console = console if console is not None else Console()

    table = Table(title="Demultiplexed reads")
    table.add_column("Direction")
    table.add_column("File")
    table.add_column("Lines", justify="right")
    table.add_column("Records", justify="right")
    table.add_row("forward", str(report.fwd_seqs), str(report.fwd_lines), str(report.fwd_records))
    table.add_row("reverse", str(report.rev_seqs), str(report.rev_lines), str(report.rev_records))

    console.print(table)


def verify_demultiplexing(
    run: PreprocessingRun,
    sample_ids: Iterable[str],
    allow_mismatch: bool,
    console: Console | None = None,
) -> CountReport:
    """
    Check the demultiplexed streams before they are split per sample.

    Forward and reverse streams must have the same number of records and every record must belong
    to a sample in the mapping file. With allow_mismatch a failed check is only logged as a warning.
    """
    report = compare_demultiplexed_counts(run)
    print_count_report(report, console=console)

    if not report.is_balanced:
        message = f"Forward ({report.fwd_records}) and reverse ({report.rev_records}) record counts differ"
        if not allow_mismatch:
            raise RecordCountMismatchError(message)
        logger.warning(message)
    else:
        logger.info("Forward and reverse streams both have %d records", report.fwd_records)

    sample_ids = set(sample_ids)
    for seqs_fastq in [run.demux_fwd_seqs, run.demux_rev_seqs]:
        unmapped_samples = find_unmapped_samples(seqs_fastq, sample_ids)
        if unmapped_samples:
            message = f"Samples {sorted(unmapped_samples)} in {seqs_fastq} are not in the mapping file"
            if not allow_mismatch:
                raise UnmappedSampleError(message)
            logger.warning(message)

    return report
