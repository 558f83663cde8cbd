from pathlib import Path
from typing import List

from ampliprep.configuration import PipelineConfig
from ampliprep.logging_config import logger
from ampliprep.run import PreprocessingRun
from ampliprep.utils import run_external_tool


def build_splitting_command(executable: Path, seqs_fastq: Path, file_type: str, output_dir: Path) -> List[str]:
    return [
        str(executable),
        "-i",
        str(seqs_fastq),
        "--file_type",
        file_type,
        "-o",
        str(output_dir),
    ]


def process_splitting(
    run: PreprocessingRun,
    config: PipelineConfig,
    dry_run: bool,
) -> None:

    commands = [
        build_splitting_command(
            executable=config.split_sequence_executable,
            seqs_fastq=seqs_fastq,
            file_type=config.split_file_type,
            output_dir=output_dir,
        )
        for seqs_fastq, output_dir in [(run.demux_fwd_seqs, run.split_fwd_dir), (run.demux_rev_seqs, run.split_rev_dir)]
    ]

    if dry_run:
        for command in commands:
            logger.info("Dry run. Skipping: %s", " ".join(command))
        return

    for command in commands:
        run_external_tool(command)
