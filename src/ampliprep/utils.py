import subprocess
from pathlib import Path
from typing import List

from ampliprep.logging_config import logger


def write_to_file(file_path: Path, content: str):
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)


def run_external_tool(command: List[str]) -> None:
    logger.info("Running: %s", " ".join(command))

    # Output of the tool goes straight to the terminal, failures propagate as CalledProcessError
    subprocess.run(command, check=True)


def count_lines(path: Path) -> int:
    # Same as `wc -l`, i.e. counts newline characters
    count = 0
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1 << 20), b""):
            count += chunk.count(b"\n")
    return count
