import typer
from pathlib import Path
from typing import Optional
from pydantic import ValidationError

from webopt.config.loader import load_config
from webopt.infrastructure.logging import setup_logging
from webopt.infrastructure.event_bus import EventBus
from webopt.infrastructure.file_scanner import FileScanner
from webopt.infrastructure.ffprobe import FFprobeAdapter
from webopt.infrastructure.ffmpeg import FFmpegAdapter
from webopt.infrastructure.housekeeping import HousekeepingService
from webopt.pipeline.orchestrator import Orchestrator
from webopt.domain.errors import NoInputFilesError
from webopt.ui.state import UIState
from webopt.ui.manager import UIManager
from webopt.ui.reporter import ConsoleReporter

app = typer.Typer(help="webopt - batch web video optimizer (WebM + MP4 + poster)")

@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def optimize(
    max_seconds: Optional[int] = typer.Option(None, "--max-seconds", min=1, help="Trim renditions to the first N seconds when the source is longer"),
    config_path: Optional[Path] = typer.Option(Path("conf/webopt.yaml"), "--config", "-c", help="Path to YAML config"),
    input_dir: Optional[Path] = typer.Option(None, "--input-dir", "-i", help="Directory containing .mp4 sources (default: videos)"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Output root (default: optimized)"),
    threads: Optional[int] = typer.Option(None, "--threads", "-t", min=1, help="Number of files processed in parallel"),
    clean_pass_logs: bool = typer.Option(False, "--clean-pass-logs", help="Remove stale ffmpeg2pass-*.log files from the working directory first"),
    debug: bool = typer.Option(False, "--debug/--no-debug", help="Enable verbose debug logging")
):
    """Convert every MP4 in the input directory into WebM, MP4 and a poster image."""
    try:
        config = load_config(config_path)
    except (ValidationError, ValueError, OSError) as e:
        typer.secho(f"Error: invalid config {config_path}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    # Apply CLI overrides
    if max_seconds is not None: config.general.max_seconds = max_seconds
    if input_dir is not None: config.general.input_dir = input_dir
    if output_dir is not None: config.general.output_dir = output_dir
    if threads is not None: config.general.threads = threads
    if clean_pass_logs: config.general.clean_pass_logs = True
    if debug: config.general.debug = True

    general = config.general
    logger = setup_logging(general.output_dir, debug=general.debug)
    logger.info(f"webopt started: input={general.input_dir}, output={general.output_dir}")
    logger.info(f"Config: max_seconds={general.max_seconds}, threads={general.threads}, debug={general.debug}")

    bus = EventBus()
    ui_state = UIState()
    UIManager(bus, ui_state)
    reporter = ConsoleReporter(bus, size_target_mb=general.size_target_mb, tag_lines=general.threads > 1)

    if general.clean_pass_logs:
        HousekeepingService().cleanup_pass_logs(Path.cwd())

    orchestrator = Orchestrator(
        config=config,
        event_bus=bus,
        file_scanner=FileScanner(extensions=general.extensions),
        ffprobe_adapter=FFprobeAdapter(binary=general.ffprobe_bin),
        ffmpeg_adapter=FFmpegAdapter(config=config)
    )

    reporter.console.print("🎬 Starting video optimization process...")
    try:
        orchestrator.run(general.input_dir)
    except NoInputFilesError as e:
        logger.error(str(e))
        reporter.error(str(e))
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        typer.echo("\nInterrupted by user")
        raise typer.Exit(code=130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        typer.secho(f"Fatal Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    logger.info(
        f"webopt finished: completed={ui_state.completed_count}, failed={ui_state.failed_count}, "
        f"bytes_written={ui_state.total_output_bytes}"
    )

if __name__ == "__main__":
    app()
