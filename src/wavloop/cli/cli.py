"""CLI interface for wavloop."""
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from wavloop.core import extend_wave, inspect_wave
from wavloop.utils.types import DEFAULT_THRESHOLD_DB, ExtendRequest, LoopConfig

app = typer.Typer(
    name="wavloop",
    add_completion=False,
    help="Extend looping WAVE recordings by repeating a detected loop segment.",
)

LOG_LEVEL = os.getenv("WAVLOOP_LOG_LEVEL", "WARNING").upper()

# Header fields with their 1-based byte ranges
HEADER_FIELDS = [
    ("ChunkID", "1-4", "chunk_id"),
    ("ChunkSize", "5-8", "chunk_size"),
    ("Format", "9-12", "format"),
    ("SubChunk1ID", "13-16", "subchunk1_id"),
    ("SubChunk1Size", "17-20", "subchunk1_size"),
    ("AudioFormat", "21-22", "audio_format"),
    ("NumChannels", "23-24", "num_channels"),
    ("SampleRate", "25-28", "sample_rate"),
    ("ByteRate", "29-32", "byte_rate"),
    ("BlockAlign", "33-34", "block_align"),
    ("BitsPerSample", "35-36", "bits_per_sample"),
    ("SubChunk2ID", "37-40", "subchunk2_id"),
    ("SubChunk2Size", "41-44", "subchunk2_size"),
]


class ExitCode:
    """Exit codes for the CLI."""
    SUCCESS = 0  # Operation completed successfully
    ABORTED = 1  # User declined to continue
    USER_ERROR = 2  # User error (invalid input, file not found, etc.)
    INTERNAL_ERROR = 3  # Internal error (unexpected exception, etc.)
    IO_ERROR = 4  # Input could not be read or output could not be written


@app.callback()
def configure_logging() -> None:
    """Extend looping WAVE recordings by repeating a detected loop segment."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def write_json_report(data: dict[str, Any], output_path: str | None, pretty: bool = True) -> None:
    """Write JSON report to file or stdout."""
    json_str = json.dumps(data, indent=2 if pretty else None, ensure_ascii=False)

    if output_path:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(json_str, encoding="utf-8")
        typer.echo(f"Report written to: {output_file}", err=True)
    else:
        typer.echo(json_str)


def check_input_file(input_path: Path, assume_yes: bool) -> None:
    """Exit unless input_path is an existing file the user agreed to process."""
    if not input_path.suffix:
        typer.echo("Error: Please include the filename extension.", err=True)
        sys.exit(ExitCode.USER_ERROR)

    if not input_path.exists():
        typer.echo(f"Error: Input file not found: {input_path}", err=True)
        sys.exit(ExitCode.USER_ERROR)

    if not input_path.is_file():
        typer.echo(f"Error: Path is not a file: {input_path}", err=True)
        sys.exit(ExitCode.USER_ERROR)

    if input_path.suffix.lower() != ".wav" and not assume_yes:
        if not typer.confirm("Only .wav files are supported. Continue?", default=False):
            sys.exit(ExitCode.ABORTED)


@app.command()
def info(
    file: str = typer.Argument(..., help="The WAVE file to inspect."),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output results as JSON."),
) -> None:
    """
    Print the header fields of a WAVE file.
    """
    input_path = Path(file)

    if not input_path.is_file():
        typer.echo(f"Error: Input file not found: {input_path}", err=True)
        sys.exit(ExitCode.USER_ERROR)

    try:
        summary = inspect_wave(input_path)
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.IO_ERROR)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.USER_ERROR)

    if json_output:
        write_json_report(summary, None)
        sys.exit(ExitCode.SUCCESS)

    for warning in summary["warnings"]:
        typer.echo(f"WARNING: {warning}")
    if summary["warnings"]:
        typer.echo("")

    header = summary["header"]
    for label, byte_range, key in HEADER_FIELDS:
        typer.echo(f"{label} ({byte_range}): {header[key]}")
    typer.echo(f"Samples: {summary['sample_count']} ({summary['duration_s']:.2f}s)")

    sys.exit(ExitCode.SUCCESS)


@app.command()
def extend(
    file: str = typer.Argument(..., help="The WAVE file to extend."),
    minutes: int = typer.Argument(..., help="New length of the audio, in whole minutes."),
    begin: str = typer.Argument(..., help="Time just before the loop starts, as [[MM:]SS[.frac]]. The more precise, the better."),
    end: str = typer.Argument(..., help="Time just before the loop ends, as [[MM:]SS[.frac]]. The more precise, the better."),
    threshold: float = typer.Option(DEFAULT_THRESHOLD_DB, "--threshold", "-t", help="Level in dBFS that marks a loop point (negative)."),
    output: str | None = typer.Option(None, "--out", "-o", help="Output path. Defaults to the input name with -EXTENDED before the extension."),
    assume_yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask before processing files without a .wav extension."),
    report: str | None = typer.Option(None, "--report", "-r", help="Output path for JSON report."),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output results as JSON (always enabled if --report is used)."),
    pretty: bool = typer.Option(True, "--pretty/--no-pretty", help="Pretty print JSON output."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite output file if it exists."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Find loop points and plan without writing output."),
) -> None:
    """
    Extend a looping WAVE file to the requested length.

    Put BEGIN and END slightly before the actual loop boundaries; the first
    sample at or above the threshold after each time becomes the loop point.
    """
    input_path = Path(file)
    check_input_file(input_path, assume_yes)

    try:
        extend_request = ExtendRequest(
            input_path=str(input_path),
            output_path=output,
            minutes=minutes,
            loop_start=begin,
            loop_end=end,
            config=LoopConfig(threshold_db=threshold),
            overwrite=overwrite,
            dry_run=dry_run,
        )

        result = extend_wave(extend_request)

    except ValidationError as e:
        typer.echo(f"Validation error: {e}", err=True)
        sys.exit(ExitCode.USER_ERROR)
    except FileExistsError as e:
        typer.echo(f"Error: {e}. Use --overwrite to replace it.", err=True)
        sys.exit(ExitCode.USER_ERROR)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.USER_ERROR)
    except OSError as e:
        typer.echo(f"I/O error: {e}", err=True)
        sys.exit(ExitCode.IO_ERROR)
    except Exception as e:
        typer.echo(f"Internal error during extension: {e}", err=True)
        sys.exit(ExitCode.INTERNAL_ERROR)

    if json_output or report:
        write_json_report({"status": "success", **result}, report, pretty)
        sys.exit(ExitCode.SUCCESS)

    # Human-readable output
    for warning in result["warnings"]:
        typer.echo(f"WARNING: {warning}")

    if result["found"]:
        typer.echo("Found and updated looping point!")
        typer.echo("If the output doesn't sound right, try adjusting the threshold value and/or section to loop.")
    else:
        typer.echo("Unable to find exact looping point.")
        typer.echo("Try decreasing the threshold value.")

    typer.echo(f"Starting loop at {result['loop_start_time']}")
    typer.echo(f"Ending loop at {result['loop_end_time']}")
    typer.echo(f"Loops: {result['loops']}")
    typer.echo(
        f"Length: {result['original_duration_s']:.2f}s -> {result['extended_duration_s']:.2f}s"
    )

    if result["written"]:
        typer.echo(f"Extended audio written to: {result['output_file']}")

    sys.exit(ExitCode.SUCCESS)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
