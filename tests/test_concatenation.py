import subprocess
from pathlib import Path

import pytest

from ampliprep.concatenation import concatenate_files, concatenate_lanes, concatenation_is_done
from ampliprep.run import PreprocessingRun, find_lane

from conftest import LANES, read_fastq, write_fastq


@pytest.mark.parametrize(
    "inputs, expected",
    [
        pytest.param(
            [[("a", "A")]],
            [("a", "A")],
            id="Single file",
        ),
        pytest.param(
            [[("a", "A"), ("b", "C")], [("c", "G")]],
            [("a", "A"), ("b", "C"), ("c", "G")],
            id="Two files",
        ),
        pytest.param(
            [[("c", "G")], [], [("a", "A"), ("b", "C")]],
            [("c", "G"), ("a", "A"), ("b", "C")],
            id="Order preserved with empty file",
        ),
    ],
)
def test_concatenate_files(tmp_path: Path, inputs, expected):
    # Arrange
    input_files = []
    for i, records in enumerate(inputs):
        input_file = tmp_path / f"input{i}.fastq"
        write_fastq(input_file, records)
        input_files.append(input_file)
    output_file = tmp_path / "out" / "merged.fastq"

    # Act
    concatenate_files(input_files, output_file)

    # Assert
    assert read_fastq(output_file) == expected
    assert output_file.read_bytes() == b"".join(x.read_bytes() for x in input_files)


def test_concatenate_files_missing_input(tmp_path: Path):
    # Arrange
    existing = tmp_path / "existing.fastq"
    write_fastq(existing, [("a", "A")])

    # Act / Assert
    with pytest.raises(subprocess.CalledProcessError):
        concatenate_files([existing, tmp_path / "missing.fastq"], tmp_path / "merged.fastq")


def test_concatenate_lanes(tmp_path: Path, raw_dir: Path):
    # Arrange
    run = PreprocessingRun(tmp_path / "work")
    lanes = [find_lane(raw_dir, lane) for lane in LANES]

    # Act
    concatenate_lanes(lanes, run)

    # Assert
    all_reads = [read for reads in LANES.values() for read in reads]
    assert concatenation_is_done(run)
    assert read_fastq(run.fwd_fastq) == [(x[0], x[1]) for x in all_reads]
    assert read_fastq(run.index_fastq) == [(x[0], x[2]) for x in all_reads]
    assert read_fastq(run.rev_fastq) == [(x[0], x[3]) for x in all_reads]


def test_concatenate_lanes_without_lanes(tmp_path: Path):
    # Act / Assert
    with pytest.raises(ValueError):
        concatenate_lanes([], PreprocessingRun(tmp_path))
