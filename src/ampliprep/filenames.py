# Description: Filenames used in the ampliprep project.

# Working directory
PIPELINE_CONFIG = "pipeline_config.json"
PREPROCESSING_SUMMARY = "preprocessing_summary.csv"

# Concatenation
FWD_FASTQ = "fwd.fastq"
INDEX_FASTQ = "index.fastq"
REV_FASTQ = "rev.fastq"

# Demultiplexing
DEMUX_FWD_DIR = "f"
DEMUX_REV_DIR = "r"
DEMUX_SEQS = "seqs.fastq"

# Splitting
SPLIT_FWD_DIR = "splitf"
SPLIT_REV_DIR = "splitr"
SPLIT_EXTENSION = ".fastq"

# Renaming
FWD_SUFFIX = "_R1"
REV_SUFFIX = "_R2"
