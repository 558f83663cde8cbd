from pathlib import Path
from typing import List

from ampliprep.configuration import PipelineConfig
from ampliprep.logging_config import logger
from ampliprep.run import PreprocessingRun
from ampliprep.utils import run_external_tool


def build_demultiplexing_command(
    executable: Path,
    reads: Path,
    index: Path,
    mapping_file: Path,
    output_dir: Path,
    demux_flags: List[str],
) -> List[str]:
    # Forward and reverse reads share the same index reads and mapping file
    return [
        str(executable),
        "-i",
        str(reads),
        "-m",
        str(mapping_file),
        "-b",
        str(index),
        *demux_flags,
        "-o",
        str(output_dir),
    ]


def process_demultiplexing(
    run: PreprocessingRun,
    config: PipelineConfig,
    dry_run: bool,
) -> None:

    commands = [
        build_demultiplexing_command(
            executable=config.split_libraries_executable,
            reads=reads,
            index=run.index_fastq,
            mapping_file=run.mapping_file,
            output_dir=output_dir,
            demux_flags=config.demux_flags,
        )
        for reads, output_dir in [(run.fwd_fastq, run.demux_fwd_dir), (run.rev_fastq, run.demux_rev_dir)]
    ]

    if dry_run:
        for command in commands:
            logger.info("Dry run. Skipping: %s", " ".join(command))
        return

    for command in commands:
        run_external_tool(command)


def demultiplexing_is_done(run: PreprocessingRun) -> bool:
    return run.demux_fwd_seqs.exists() and run.demux_rev_seqs.exists()
