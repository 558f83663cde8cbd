from collections import defaultdict
from pathlib import Path
from typing import List, Tuple

import pytest
from Bio.Seq import reverse_complement
from Bio.SeqIO.QualityIO import FastqGeneralIterator

from ampliprep import demultiplexing, splitting
from ampliprep.configuration import read_mapping_file
from ampliprep.verification import get_sample_id

MAPPING_FILE_TEXT = "#SampleID\tBarcodeSequence\tLinkerPrimerSequence\tDescription\nS1\tACGT\t\tsample_1\nS2\tTTGC\t\tsample_2\n"

# Per lane: (title, forward seq, index seq, reverse seq)
LANES = {
    "Relman_Hypo1a": [
        ("read1", "AAAA", "ACGT", "CCCC"),
        ("read2", "GGGG", "TTGC", "TTTT"),
    ],
    "Relman_Hypo1b": [
        ("read3", "AACC", "ACGT", "GGTT"),
        ("read4", "CCAA", "TTGC", "TTGG"),
    ],
}


def create_files(files):
    for file in files:
        file.parent.mkdir(parents=True, exist_ok=True)
        file.touch()


def write_fastq(path: Path, records: List[Tuple[str, str]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        for title, seq in records:
            f.write(f"@{title}\n{seq}\n+\n{'I' * len(seq)}\n")


def read_fastq(path: Path) -> List[Tuple[str, str]]:
    with open(path, "r", encoding="utf-8") as in_handle:
        return [(title, seq) for title, seq, _ in FastqGeneralIterator(in_handle)]


def get_arg(command: List[str], flag: str) -> str:
    return command[command.index(flag) + 1]


def fake_split_libraries(command: List[str]) -> None:
    reads, index, mapping_file, output_dir = (Path(get_arg(command, x)) for x in ["-i", "-b", "-m", "-o"])

    # Both index reads and mapping barcodes are reverse complemented
    barcodes = {reverse_complement(barcode): sample_id for sample_id, barcode in read_mapping_file(mapping_file).items()}

    records = []
    for (title, seq), (_, index_seq) in zip(read_fastq(reads), read_fastq(index)):
        sample_id = barcodes.get(reverse_complement(index_seq))
        if sample_id is not None:
            records.append((f"{sample_id}_{len(records)} {title} orig_bc={index_seq} new_bc={index_seq} bc_diffs=0", seq))

    write_fastq(output_dir / "seqs.fastq", records)


def fake_split_sequence(command: List[str]) -> None:
    seqs_fastq, output_dir = Path(get_arg(command, "-i")), Path(get_arg(command, "-o"))

    samples = defaultdict(list)
    for title, seq in read_fastq(seqs_fastq):
        samples[get_sample_id(title)].append((title, seq))

    output_dir.mkdir(parents=True, exist_ok=True)
    for sample_id, records in samples.items():
        write_fastq(output_dir / f"{sample_id}.fastq", records)


def fake_external_tool(command: List[str]) -> None:
    tools = {
        "split_libraries_fastq.py": fake_split_libraries,
        "split_sequence_file_on_sample_ids.py": fake_split_sequence,
    }
    tools[Path(command[0]).name](command)


@pytest.fixture
def fake_tools(monkeypatch):
    calls = []

    def run_external_tool(command):
        calls.append(command)
        fake_external_tool(command)

    monkeypatch.setattr(demultiplexing, "run_external_tool", run_external_tool)
    monkeypatch.setattr(splitting, "run_external_tool", run_external_tool)
    return calls


@pytest.fixture
def mapping_file(tmp_path: Path) -> Path:
    path = tmp_path / "mappingfile.txt"
    path.write_text(MAPPING_FILE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def raw_dir(tmp_path: Path) -> Path:
    raw = tmp_path / "raw"
    for lane, reads in LANES.items():
        for read_number, position in [("R1", 1), ("R2", 2), ("R3", 3)]:
            write_fastq(
                raw / f"{lane}_NoIndex_L001_{read_number}_001.fastq",
                [(read[0], read[position]) for read in reads],
            )
    return raw
