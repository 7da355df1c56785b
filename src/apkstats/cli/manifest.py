"""CLI commands for AndroidManifest.xml extraction."""

import json
from pathlib import Path

import typer
from rich.table import Table

from apkstats.core.batch import discover_decompiled_dirs, extract_many
from apkstats.core.manifest import ManifestExtractor
from apkstats.exceptions import ApkStatsError
from apkstats.models.apk import ApkFile
from apkstats.utils.config import get_timeout, get_workers
from apkstats.utils.output import console, manifest_table

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_manifest(
    decompiled_dir: Path = typer.Argument(
        ...,
        help="Decompiled package directory (apktool output).",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    marker: str | None = typer.Option(
        None,
        "--marker",
        "-m",
        help="Diagnostic tag for log lines. Defaults to the directory name.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with status 1 if the manifest could not be fully processed.",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """Extract facts from the AndroidManifest.xml of one decompiled package."""
    console.set_json_mode(json_output)

    try:
        apk_file = ApkFile.from_directory(decompiled_dir, marker=marker)
        result = ManifestExtractor(apk_file).run()
    except ApkStatsError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None

    if json_output:
        typer.echo(json.dumps(result.record.model_dump(mode="json"), indent=2))
    else:
        console.print(manifest_table(result.record))
        if result.error is not None:
            console.print_warning(f"Incomplete extraction: {result.error}")

    if strict and not result.success:
        raise typer.Exit(1)


@app.command("batch")
def batch_manifests(
    root: Path = typer.Argument(
        ...,
        help="Directory holding one decompiled directory per package.",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        min=1,
        help="Parallel extractions (default: config 'workers' or 4).",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        min=0.0,
        help="Per-package deadline in seconds (default: config 'timeout').",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        "-j",
        help="Output as JSON.",
    ),
) -> None:
    """Extract manifests of every decompiled package under ROOT."""
    console.set_json_mode(json_output)

    try:
        directories = discover_decompiled_dirs(root)
        apk_files = [ApkFile.from_directory(path) for path in directories]
        results = extract_many(
            apk_files,
            workers=workers or get_workers(),
            timeout=timeout if timeout is not None else get_timeout(),
        )
    except ApkStatsError as e:
        console.print_error(str(e))
        raise typer.Exit(1) from None

    if json_output:
        output = [result.model_dump(mode="json") for result in results]
        typer.echo(json.dumps(output, indent=2))
        return

    if not results:
        console.print_warning(f"No decompiled packages found in {root}")
        return

    table = Table()
    table.add_column("Package dir", style="cyan")
    table.add_column("Package name", style="green")
    table.add_column("Target SDK")
    table.add_column("Components", justify="right")
    table.add_column("Permissions", justify="right")
    table.add_column("Status")

    for result in results:
        manifest = result.manifest
        if result.timed_out:
            status = "[red]timeout[/red]"
        elif result.error:
            status = "[yellow]partial[/yellow]"
        else:
            status = "[green]ok[/green]"
        table.add_row(
            result.marker,
            manifest.package_name or "-",
            manifest.uses_target_sdk_version or "-",
            str(manifest.number_of_components),
            str(len(manifest.uses_permissions)),
            status,
        )

    console.print(table)

    failed = sum(1 for result in results if not result.success)
    if failed:
        console.print_warning(f"{failed} of {len(results)} manifests failed")
    else:
        console.print_success(f"Processed {len(results)} manifests")
