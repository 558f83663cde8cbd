import subprocess
from pathlib import Path
from typing import List

from ampliprep.logging_config import logger
from ampliprep.run import Lane, PreprocessingRun


def concatenate_files(input_files: List[Path], output_file: Path) -> None:
    output_file.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Concatenating %s > %s", " ".join(str(x) for x in input_files), output_file)

    # Ordered append, a missing input makes cat fail with a CalledProcessError
    with open(output_file, "wb") as f:
        subprocess.run(["cat", *[str(x) for x in input_files]], stdout=f, check=True)


def concatenate_lanes(lanes: List[Lane], run: PreprocessingRun) -> None:
    if not lanes:
        raise ValueError("At least one lane is required for concatenation")

    concatenate_files([lane.forward for lane in lanes], run.fwd_fastq)
    concatenate_files([lane.index for lane in lanes], run.index_fastq)
    concatenate_files([lane.reverse for lane in lanes], run.rev_fastq)


def concatenation_is_done(run: PreprocessingRun) -> bool:
    return run.fwd_fastq.exists() and run.index_fastq.exists() and run.rev_fastq.exists()
