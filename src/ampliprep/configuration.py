import csv
import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from ampliprep.constants import (
    BARCODE_SEQUENCE,
    DEMUX_FLAGS,
    REQUIRED_MAPPING_FIELDS,
    SAMPLE_ID,
    SPLIT_FILE_TYPE,
)
from ampliprep.logging_config import logger
from ampliprep.utils import write_to_file


@dataclass
class PipelineConfig:
    split_libraries_executable: Path
    split_sequence_executable: Path
    demux_flags: List[str]
    split_file_type: str = SPLIT_FILE_TYPE

    def save(self, path: Path):
        content = json.dumps(
            {
                "split_libraries_executable": str(self.split_libraries_executable),
                "split_sequence_executable": str(self.split_sequence_executable),
                "demux_flags": self.demux_flags,
                "split_file_type": self.split_file_type,
            },
            indent=4,
        )
        write_to_file(path, content)

    @classmethod
    def load(cls, path: Path):
        with open(path, "r", encoding="utf-8") as f:
            config = json.load(f)

        return cls(
            split_libraries_executable=Path(config["split_libraries_executable"]),
            split_sequence_executable=Path(config["split_sequence_executable"]),
            demux_flags=list(config["demux_flags"]),
            split_file_type=config["split_file_type"],
        )


def is_executable_valid(executable: str) -> bool:
    return shutil.which(executable) is not None


def get_pipeline_config(split_libraries_executable: str, split_sequence_executable: str) -> PipelineConfig:

    # Resolve executables on PATH, fall back to the given value (e.g. for dry runs)
    split_libraries_path = shutil.which(split_libraries_executable) or split_libraries_executable
    split_sequence_path = shutil.which(split_sequence_executable) or split_sequence_executable

    return PipelineConfig(
        split_libraries_executable=Path(split_libraries_path),
        split_sequence_executable=Path(split_sequence_path),
        demux_flags=list(DEMUX_FLAGS),
    )


def read_mapping_lines(mapping_file: Path) -> List[str]:
    # Blank lines are ignored
    with open(mapping_file, "r", encoding="utf-8") as f:
        return [line for line in f.read().splitlines() if line.strip()]


def load_mapping_rows(mapping_file: Path) -> List[Dict[str, str]]:
    """
    Load a QIIME mapping file as a list of dicts.

    The header line starts with '#SampleID'. Any later line starting with '#' is a comment.
    """
    lines = read_mapping_lines(mapping_file)

    if not lines:
        return []

    header, body = lines[0], [line for line in lines[1:] if not line.startswith("#")]
    dict_reader = csv.DictReader([header, *body], delimiter="\t")

    # Strip whitespace from keys and values
    return [{key.strip(): value.strip() if value else "" for key, value in d.items() if key} for d in dict_reader]


def read_mapping_file(mapping_file: Path) -> Dict[str, str]:
    return {row[SAMPLE_ID]: row[BARCODE_SEQUENCE] for row in load_mapping_rows(mapping_file)}


def mapping_file_is_valid(mapping_file: Path) -> bool:

    # Read first non-blank line (header) of mapping file
    lines = read_mapping_lines(mapping_file)
    header = [field.strip() for field in lines[0].split("\t")] if lines else []

    # Check header has required fields
    if any(field not in header for field in REQUIRED_MAPPING_FIELDS):
        logger.warning("Mapping file %s is missing required fields: %s", mapping_file, REQUIRED_MAPPING_FIELDS)
        return False

    rows = load_mapping_rows(mapping_file)
    if not rows:
        logger.warning("Mapping file %s has no samples", mapping_file)
        return False

    # Check sample IDs and barcodes are present and unique
    for field in REQUIRED_MAPPING_FIELDS:
        values = [row[field] for row in rows]
        if any(not value for value in values):
            logger.warning("Empty %s found in mapping file %s", field, mapping_file)
            return False
        duplicates = sorted({value for value in values if values.count(value) > 1})
        if duplicates:
            logger.warning("Duplicate %s (%s) found in mapping file %s", field, duplicates, mapping_file)
            return False

    return True
