"""Command-line interface for Seedarr."""

import asyncio
import sys
from pathlib import Path

import click

from seedarr import __version__
from seedarr.config import load_config
from seedarr.core.analyzer import MediaInfoAnalyzer
from seedarr.core.cache import SidecarCacheRepository, TechnicalMetadataCache
from seedarr.core.pipeline import ReleasePipeline, summarize
from seedarr.exceptions import AnalysisError, SeedarrError
from seedarr.metadata.radarr import RadarrClient
from seedarr.models.metadata import DescriptiveMetadata
from seedarr.naming.builder import build_release_name
from seedarr.utils.language import normalize_language_code
from seedarr.utils.logger import setup_logging

STATUS_COLORS = {
    "success": "green",
    "dry_run": "cyan",
    "skipped": "yellow",
    "error": "red",
}


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (defaults to $SEEDARR_CONFIG_PATH or ./config.yaml)",
)
@click.pass_context
def cli(ctx, config):
    """Seedarr - publish a Radarr library as torrent-ready releases."""
    try:
        cfg = load_config(config)
        ctx.ensure_object(dict)
        ctx.obj["config"] = cfg

        setup_logging(cfg.logging)

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--dry-run", is_flag=True, default=False, help="Export files but skip torrents")
@click.option("--limit", type=int, default=None, help="Only process the first N movies")
@click.pass_context
def run(ctx, dry_run, limit):
    """Name, export and package every Radarr movie with a file."""
    config = ctx.obj["config"]
    if dry_run:
        config.torrent.dry_run = True
    if limit is not None:
        config.radarr.limit = limit

    async def _fetch():
        client = RadarrClient(config.radarr)
        try:
            return await client.list_movies(limit=config.radarr.limit)
        finally:
            await client.close()

    try:
        movies = asyncio.run(_fetch())
        pipeline = ReleasePipeline(config)
    except SeedarrError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(1)

    if not movies:
        click.secho("⊘ No movies with files found", fg="yellow")
        sys.exit(0)

    click.echo(f"Found {len(movies)} movie(s)")
    click.echo("")

    results = []
    for idx, movie in enumerate(movies, 1):
        click.echo(f"[{idx}/{len(movies)}] {movie.label}")
        result = pipeline.process_movie(movie)
        results.append(result)
        click.secho(f"  {result}", fg=STATUS_COLORS[result.status])

    counts = summarize(results)
    click.echo("")
    click.echo("=" * 60)
    click.echo("Summary:")
    click.secho(f"  ✓ Success:  {counts['success']}", fg="green")
    click.secho(f"  ⊙ Dry run:  {counts['dry_run']}", fg="cyan")
    click.secho(f"  ⊘ Skipped:  {counts['skipped']}", fg="yellow")
    click.secho(f"  ✗ Errors:   {counts['error']}", fg="red")
    click.echo(f"  Total:      {len(results)}")

    if counts["error"] > 0:
        sys.exit(1)


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--title", required=True, help="Localized title")
@click.option("--original-title", default=None, help="Original title")
@click.option("--year", type=int, default=None, help="Release year")
@click.option("--original-language", default=None, help="Original language (code or name)")
@click.option("--quality", default=None, help="Radarr quality name, e.g. Bluray-1080p")
@click.option("--group", default=None, help="Release group")
@click.option("--scene-name", default=None, help="Existing scene name to validate and salvage")
@click.pass_context
def name(ctx, file, title, original_title, year, original_language, quality, group, scene_name):
    """Print the release name for a local FILE without exporting it."""
    config = ctx.obj["config"]

    analyzer = MediaInfoAnalyzer()
    cache = TechnicalMetadataCache(
        SidecarCacheRepository(), analyzer, enabled=config.media.enable_mediainfo_cache
    )
    descriptive = DescriptiveMetadata(
        title=title,
        original_title=original_title,
        year=year,
        original_language=normalize_language_code(original_language),
        quality=quality,
        release_group=group,
        scene_name=scene_name,
        file_name=file.name,
    )

    try:
        technical = cache.get_or_refresh(file)
    except AnalysisError as e:
        click.secho(f"✗ {e}", fg="red", err=True)
        sys.exit(1)

    decision = build_release_name(descriptive, technical, config)
    click.echo(decision.name)
    if scene_name:
        if decision.issues:
            issues = ", ".join(issue.value for issue in decision.issues)
            click.secho(f"  existing name issues: {issues}", fg="yellow", err=True)
        else:
            click.secho("  existing name looks valid", fg="green", err=True)


@cli.command()
def version():
    """Show version information."""
    click.echo(f"Seedarr v{__version__}")


def main():
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
