from pathlib import Path
from typing import List

from ampliprep.filenames import FWD_SUFFIX, REV_SUFFIX, SPLIT_EXTENSION
from ampliprep.logging_config import logger
from ampliprep.run import PreprocessingRun


def get_suffixed_path(path: Path, suffix: str, extension: str) -> Path:
    # sample.fastq -> sample_R1.fastq
    stem = path.name[: -len(extension)]
    return path.with_name(f"{stem}{suffix}{extension}")


def add_direction_suffix(directory: Path, suffix: str, extension: str = SPLIT_EXTENSION) -> List[Path]:
    files = sorted(x for x in directory.glob(f"*{extension}") if x.is_file())

    # Files already carrying the suffix are left as they are
    renamed_files = [x for x in files if x.name.endswith(f"{suffix}{extension}")]
    for renamed_file in renamed_files:
        logger.info("Skipping %s, already renamed", renamed_file.name)
    files = [x for x in files if x not in renamed_files]

    renames = [(x, get_suffixed_path(x, suffix, extension)) for x in files]

    # Check all targets before renaming anything
    targets = [target for _, target in renames]
    if len(set(targets)) != len(targets):
        raise FileExistsError(f"Renaming files in {directory} would produce duplicate names")
    existing_targets = [target for target in targets if target.exists()]
    if existing_targets:
        raise FileExistsError(f"Renaming files in {directory} would overwrite {[x.name for x in existing_targets]}")

    for source, target in renames:
        source.rename(target)
        logger.info("Renamed %s to %s", source.name, target.name)

    return targets


def process_renaming(run: PreprocessingRun) -> None:
    add_direction_suffix(run.split_fwd_dir, FWD_SUFFIX)
    add_direction_suffix(run.split_rev_dir, REV_SUFFIX)
