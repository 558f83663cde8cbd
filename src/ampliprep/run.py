from dataclasses import dataclass, field
from pathlib import Path
from typing import List

import ampliprep.filenames as fn
from ampliprep.configuration import PipelineConfig
from ampliprep.constants import FORWARD_READ, INDEX_READ, LANE_FILE_PATTERN, REVERSE_READ


@dataclass
class Lane:
    name: str
    forward: Path
    index: Path
    reverse: Path


@dataclass
class PreprocessingRun:
    # Input attributes
    working_dir: Path
    mapping_file: Path | None = None

    # Derived attributes
    # General
    pipeline_config_file: Path = field(init=False)
    summary_csv: Path = field(init=False)

    # Concatenation
    fwd_fastq: Path = field(init=False)
    index_fastq: Path = field(init=False)
    rev_fastq: Path = field(init=False)

    # Demultiplexing
    demux_fwd_dir: Path = field(init=False)
    demux_rev_dir: Path = field(init=False)
    demux_fwd_seqs: Path = field(init=False)
    demux_rev_seqs: Path = field(init=False)

    # Splitting
    split_fwd_dir: Path = field(init=False)
    split_rev_dir: Path = field(init=False)

    # Pipeline config
    _config: PipelineConfig = field(init=False)

    @property
    def config(self) -> PipelineConfig:
        if not hasattr(self, "_config"):
            self._config = PipelineConfig.load(self.pipeline_config_file)
        return self._config

    def __post_init__(self):
        # General
        self.pipeline_config_file = self.working_dir / fn.PIPELINE_CONFIG
        self.summary_csv = self.working_dir / fn.PREPROCESSING_SUMMARY

        # Concatenation
        self.fwd_fastq = self.working_dir / fn.FWD_FASTQ
        self.index_fastq = self.working_dir / fn.INDEX_FASTQ
        self.rev_fastq = self.working_dir / fn.REV_FASTQ

        # Demultiplexing
        self.demux_fwd_dir = self.working_dir / fn.DEMUX_FWD_DIR
        self.demux_rev_dir = self.working_dir / fn.DEMUX_REV_DIR
        self.demux_fwd_seqs = self.demux_fwd_dir / fn.DEMUX_SEQS
        self.demux_rev_seqs = self.demux_rev_dir / fn.DEMUX_SEQS

        # Splitting
        self.split_fwd_dir = self.demux_fwd_dir / fn.SPLIT_FWD_DIR
        self.split_rev_dir = self.demux_rev_dir / fn.SPLIT_REV_DIR

    def get_split_fwd_files(self) -> List[Path]:
        return sorted(self.split_fwd_dir.glob(f"*{fn.SPLIT_EXTENSION}"))

    def get_split_rev_files(self) -> List[Path]:
        return sorted(self.split_rev_dir.glob(f"*{fn.SPLIT_EXTENSION}"))


def find_lane_file(raw_dir: Path, lane_name: str, read: str) -> Path:
    pattern = LANE_FILE_PATTERN.format(lane=lane_name, read=read)
    matches = sorted(raw_dir.glob(pattern))

    if not matches:
        raise FileNotFoundError(f"No {read} file matching {pattern} found in {raw_dir}")
    if len(matches) > 1:
        raise ValueError(f"More than one {read} file matching {pattern} found in {raw_dir}: {[x.name for x in matches]}")

    return matches[0]


def find_lane(raw_dir: Path, lane_name: str) -> Lane:
    # Illumina read numbers: R1 forward, R2 index (barcode), R3 reverse
    return Lane(
        name=lane_name,
        forward=find_lane_file(raw_dir, lane_name, FORWARD_READ),
        index=find_lane_file(raw_dir, lane_name, INDEX_READ),
        reverse=find_lane_file(raw_dir, lane_name, REVERSE_READ),
    )
