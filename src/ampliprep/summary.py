import csv
from pathlib import Path
from typing import Dict, List

from ampliprep.filenames import FWD_SUFFIX, REV_SUFFIX, SPLIT_EXTENSION
from ampliprep.run import PreprocessingRun
from ampliprep.verification import count_fastq_records


def get_sample_id_from_file(path: Path, suffix: str) -> str:
    # sample_R1.fastq -> sample
    stem = path.name[: -len(SPLIT_EXTENSION)]
    return stem[: -len(suffix)] if stem.endswith(suffix) else stem


def summarize_split_files(run: PreprocessingRun) -> List[Dict[str, str]]:
    counts: Dict[str, Dict[str, str]] = {}

    for files, suffix, column in [
        (run.get_split_fwd_files(), FWD_SUFFIX, "forward_reads"),
        (run.get_split_rev_files(), REV_SUFFIX, "reverse_reads"),
    ]:
        for split_file in files:
            sample_id = get_sample_id_from_file(split_file, suffix)
            counts.setdefault(sample_id, {"sample_id": sample_id})
            counts[sample_id][column] = str(count_fastq_records(split_file))

    return [counts[sample_id] for sample_id in sorted(counts)]


def generate_summary_csv(csv_file: Path, rows: List[Dict[str, str]]):
    # Get all unique keys from all rows (preserve order)
    header = [*dict.fromkeys(key for row in rows for key in row.keys())]
    with open(csv_file, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=header)
        writer.writeheader()
        writer.writerows(rows)
