from pathlib import Path
from typing import Annotated, List, Optional

import typer

from ampliprep.concatenation import concatenate_lanes, concatenation_is_done
from ampliprep.configuration import get_pipeline_config, is_executable_valid, mapping_file_is_valid, read_mapping_file
from ampliprep.constants import SPLIT_LIBRARIES_EXECUTABLE, SPLIT_SEQUENCE_EXECUTABLE
from ampliprep.demultiplexing import demultiplexing_is_done, process_demultiplexing
from ampliprep.logging_config import get_log_file_handler, logger, set_console_handler
from ampliprep.renaming import process_renaming
from ampliprep.run import Lane, PreprocessingRun, find_lane
from ampliprep.splitting import process_splitting
from ampliprep.summary import generate_summary_csv, summarize_split_files
from ampliprep.verification import PipelineCheckError, compare_demultiplexed_counts, print_count_report, verify_demultiplexing

# Set up the CLI
app = typer.Typer()


def setup_logging(log_file: Path | None) -> None:
    if log_file is not None:
        logger.addHandler(get_log_file_handler(log_file=log_file))
    set_console_handler(logger)


@app.command()
def run(
    mapping_file: Annotated[
        Path,
        typer.Option(
            "--mapping-file",
            "-m",
            help="Path to QIIME mapping file (tab separated, #SampleID and BarcodeSequence columns)",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    working_dir: Annotated[
        Path,
        typer.Option(
            "--working-dir",
            "-o",
            help="Working directory. Concatenated, demultiplexed and split files are written here",
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ],
    raw_dir: Annotated[
        Optional[Path],
        typer.Option(
            "--raw-dir",
            "-i",
            help="Directory with the raw lane files (<lane>_*_R[123]_*.fastq)",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    lanes: Annotated[
        Optional[List[str]],
        typer.Option(
            "--lane",
            "-l",
            help="Lane name, e.g. Relman_Hypo1a. This can be used multiple times. Files are concatenated in the given order.",
        ),
    ] = None,
    split_libraries_executable: Annotated[
        str,
        typer.Option(
            "--split-libraries-executable",
            help="Demultiplexer executable",
        ),
    ] = SPLIT_LIBRARIES_EXECUTABLE,
    split_sequence_executable: Annotated[
        str,
        typer.Option(
            "--split-sequence-executable",
            help="Per-sample splitter executable",
        ),
    ] = SPLIT_SEQUENCE_EXECUTABLE,
    log_file: Annotated[
        Optional[Path],
        typer.Option(
            "--log-file",
            help="Path to log file",
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    allow_count_mismatch: Annotated[
        bool,
        typer.Option(
            "--allow-count-mismatch",
            help="Only warn if forward and reverse record counts differ or reads belong to unknown samples",
        ),
    ] = False,
    run_concatenation: Annotated[
        bool,
        typer.Option(
            "--run-concatenation",
            help="Run concatenation",
        ),
    ] = False,
    run_demultiplexing: Annotated[
        bool,
        typer.Option(
            "--run-demultiplexing",
            help="Run demultiplexing",
        ),
    ] = False,
    run_verification: Annotated[
        bool,
        typer.Option(
            "--run-verification",
            help="Run record count verification",
        ),
    ] = False,
    run_splitting: Annotated[
        bool,
        typer.Option(
            "--run-splitting",
            help="Run splitting on sample IDs",
        ),
    ] = False,
    run_renaming: Annotated[
        bool,
        typer.Option(
            "--run-renaming",
            help="Run renaming",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-d",
            help="Dry run",
        ),
    ] = False,
) -> None:

    # Check if everything should be run (default behaviour if all options are False)
    if not any([run_concatenation, run_demultiplexing, run_verification, run_splitting, run_renaming]):
        run_concatenation = True
        run_demultiplexing = True
        run_verification = True
        run_splitting = True
        run_renaming = True

    setup_logging(log_file)

    # Welcome message
    logger.info("Running ampliprep...")

    # Check mapping file
    if not mapping_file_is_valid(mapping_file):
        logger.error("Invalid mapping file %s", str(mapping_file))
        raise typer.Exit(code=1)

    # Find lane files
    lane_list: List[Lane] = []
    if run_concatenation:
        if raw_dir is None or not lanes:
            logger.error("Concatenation needs --raw-dir and at least one --lane")
            raise typer.Exit(code=1)
        try:
            lane_list = [find_lane(raw_dir, lane) for lane in lanes]
        except (FileNotFoundError, ValueError) as e:
            logger.error(str(e))
            raise typer.Exit(code=1) from e

    preprocessing_run = PreprocessingRun(working_dir=working_dir, mapping_file=mapping_file)

    try:
        process_preprocessing_run(
            run=preprocessing_run,
            lanes=lane_list,
            split_libraries_executable=split_libraries_executable,
            split_sequence_executable=split_sequence_executable,
            allow_count_mismatch=allow_count_mismatch,
            run_concatenation=run_concatenation,
            run_demultiplexing=run_demultiplexing,
            run_verification=run_verification,
            run_splitting=run_splitting,
            run_renaming=run_renaming,
            dry_run=dry_run,
        )
    except PipelineCheckError as e:
        logger.error(str(e))
        raise typer.Exit(code=1) from e


@app.command()
def check_counts(
    working_dir: Annotated[
        Path,
        typer.Option(
            "--working-dir",
            "-o",
            help="Working directory of a run",
            exists=True,
            file_okay=False,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
) -> None:

    setup_logging(None)

    preprocessing_run = PreprocessingRun(working_dir=working_dir)
    if not demultiplexing_is_done(preprocessing_run):
        logger.error("Demultiplexed files not found in %s", str(working_dir))
        raise typer.Exit(code=1)

    report = compare_demultiplexed_counts(preprocessing_run)
    print_count_report(report)

    if not report.is_balanced:
        logger.error("Forward (%d) and reverse (%d) record counts differ", report.fwd_records, report.rev_records)
        raise typer.Exit(code=1)


def process_preprocessing_run(
    run: PreprocessingRun,
    lanes: List[Lane],
    split_libraries_executable: str,
    split_sequence_executable: str,
    allow_count_mismatch: bool,
    run_concatenation: bool,
    run_demultiplexing: bool,
    run_verification: bool,
    run_splitting: bool,
    run_renaming: bool,
    dry_run: bool,
):
    logger.info("Processing %s", str(run.working_dir))

    # Setup pipeline config. An existing config is kept so all steps of a run use the same tools
    if run.pipeline_config_file.exists():
        logger.info("Using existing pipeline config (%s)", str(run.pipeline_config_file))
        config = run.config
    elif dry_run:
        logger.info("Dry run. Skipping setup of %s", str(run.working_dir))
        config = get_pipeline_config(split_libraries_executable, split_sequence_executable)
    else:
        run.working_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Setting up pipeline config (%s)", str(run.pipeline_config_file))
        get_pipeline_config(split_libraries_executable, split_sequence_executable).save(run.pipeline_config_file)
        config = run.config

    # Check external tools
    for executable, needed in [
        (config.split_libraries_executable, run_demultiplexing),
        (config.split_sequence_executable, run_splitting),
    ]:
        if needed and not dry_run and not is_executable_valid(str(executable)):
            raise PipelineCheckError(f"Executable {executable} not found")

    # Concatenation
    if run_concatenation:
        logger.info("Running concatenation...")
        if dry_run:
            logger.info("Dry run. Skipping concatenation of %d lane(s).", len(lanes))
        else:
            concatenate_lanes(lanes, run)

    # Demultiplexing
    if run_demultiplexing:
        logger.info("Running demultiplexing...")
        if not dry_run and not concatenation_is_done(run):
            raise PipelineCheckError(f"Concatenated files not found in {run.working_dir}")
        process_demultiplexing(run=run, config=config, dry_run=dry_run)

    # Verification
    if run_verification:
        logger.info("Running verification...")
        if dry_run:
            logger.info("Dry run. Skipping verification.")
        elif not demultiplexing_is_done(run):
            raise PipelineCheckError(f"Demultiplexed files not found in {run.working_dir}")
        else:
            verify_demultiplexing(
                run=run,
                sample_ids=read_mapping_file(run.mapping_file).keys(),
                allow_mismatch=allow_count_mismatch,
            )

    # Splitting
    if run_splitting:
        logger.info("Running splitting...")
        if not dry_run and not demultiplexing_is_done(run):
            raise PipelineCheckError(f"Demultiplexed files not found in {run.working_dir}")
        process_splitting(run=run, config=config, dry_run=dry_run)

    # Renaming
    if run_renaming:
        logger.info("Running renaming...")
        if dry_run:
            logger.info("Dry run. Skipping renaming.")
            return
        process_renaming(run)

        # Summary of the final files
        generate_summary_csv(run.summary_csv, summarize_split_files(run))
        logger.info("Generated summary CSV file %s", str(run.summary_csv))

    logger.info("Done. Files in %s and %s are ready for DADA2", str(run.split_fwd_dir), str(run.split_rev_dir))


if __name__ == "__main__":
    app()
