# External tools (QIIME 1)
SPLIT_LIBRARIES_EXECUTABLE = "split_libraries_fastq.py"
SPLIT_SEQUENCE_EXECUTABLE = "split_sequence_file_on_sample_ids.py"

# Demultiplexing parameters. All set to their most permissive values, i.e. no quality filtering
PHRED_QUALITY_THRESHOLD = 0
SEQUENCE_MAX_N = 200
MAX_BAD_RUN_LENGTH = 200
MIN_PER_READ_LENGTH_FRACTION = 0
DEMUX_FLAGS = [
    "-q",
    str(PHRED_QUALITY_THRESHOLD),
    "-n",
    str(SEQUENCE_MAX_N),
    "-r",
    str(MAX_BAD_RUN_LENGTH),
    "-p",
    str(MIN_PER_READ_LENGTH_FRACTION),
    "--store_demultiplexed_fastq",
    "--rev_comp_barcode",
    "--rev_comp_mapping_barcodes",
]

# Splitting parameters
SPLIT_FILE_TYPE = "fastq"

# Lane files (Illumina read number per role)
FORWARD_READ = "R1"
INDEX_READ = "R2"
REVERSE_READ = "R3"
LANE_FILE_PATTERN = "{lane}_*_{read}_*.fastq"

# Mapping file (QIIME 1)
SAMPLE_ID = "#SampleID"
BARCODE_SEQUENCE = "BarcodeSequence"
REQUIRED_MAPPING_FIELDS = [SAMPLE_ID, BARCODE_SEQUENCE]
