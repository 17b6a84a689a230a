"""Command-line interface for mvp-gen."""

import logging

import click
from rich.markup import escape

from mvpgen import __version__
from mvpgen.cache import CacheManager
from mvpgen.console import console, setup_logging
from mvpgen.errors import MvpGenError
from mvpgen.generator import GenerateOptions, ProjectGenerator
from mvpgen.settings import MODE_NAMES, GeneratorSettings, load_settings

logger = logging.getLogger(__name__)

BANNER = "[bold cyan]mvp-gen[/bold cyan] [white]Project Template Generator[/white]"

INIT_EPILOG = """\b
Examples:
  mvp-gen init my-project
  mvp-gen init .
  mvp-gen init my-app -t express-hbs --typescript --esbuild --install
  mvp-gen init my-app --workflow ./workflow.yml --templates ./templates.json
  mvp-gen init my-project --repo https://github.com/user/config-repo.git
  mvp-gen init my-app --repo git@github.com:user/repo.git --branch develop --mode archive
"""


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"mvp-gen [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.pass_context
def main(ctx: click.Context) -> None:
    """MVP Template Generator - create projects quickly from templates."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command(epilog=INIT_EPILOG)
@click.argument("project_name")
@click.option("--template", "-t", help="Project template to use.")
@click.option("--typescript", "-ts", is_flag=True, help="Add TypeScript support.")
@click.option("--esbuild", "-es", is_flag=True, help="Add ESBuild configuration.")
@click.option("--install", "-i", is_flag=True, help="Install dependencies automatically.")
@click.option("--config", "-c", "config_path", help="Use a unified configuration file.")
@click.option("--workflow", "-w", "workflow_path", help="Use a specific workflow YAML file.")
@click.option("--templates", "templates_path", help="Use a specific templates JSON file.")
@click.option("--repo", "-r", help="Git repository URL for configurations and templates.")
@click.option("--branch", "-b", help="Git branch to use (default: main).")
@click.option(
    "--local",
    "prefer_local",
    is_flag=True,
    help="Prefer local configuration files over the repository.",
)
@click.option(
    "--mode",
    type=click.Choice(list(MODE_NAMES)),
    help="How to fetch templates from the repository (default: repo).",
)
@click.option("--no-cache", is_flag=True, help="Do not use the repository cache.")
@click.option("--debug", is_flag=True, help="Show detailed debug information.")
@click.option("--verbose", is_flag=True, help="Show verbose output.")
def init(
    project_name: str,
    template: str | None,
    typescript: bool,
    esbuild: bool,
    install: bool,
    config_path: str | None,
    workflow_path: str | None,
    templates_path: str | None,
    repo: str | None,
    branch: str | None,
    prefer_local: bool,
    mode: str | None,
    no_cache: bool,
    debug: bool,
    verbose: bool,
) -> None:
    """Initialize a new project (use "." or "./" for the current directory)."""
    setup_logging(debug or verbose)
    console.print(BANNER)

    if config_path:
        console.print(
            "[yellow]Unified config files not yet supported. "
            "Using workflow and templates separately.[/yellow]"
        )

    # CLI options override settings files and environment
    settings = load_settings().merge(
        GeneratorSettings.from_dict(
            {
                "repo": repo,
                "branch": branch,
                "prefer_local": True if prefer_local else None,
                "mode": mode,
                "use_cache": False if no_cache else None,
            }
        )
    )
    logger.debug("Effective settings: %s", settings.to_dict())

    options = GenerateOptions(
        project_name=project_name,
        template=template,
        typescript=typescript or None,
        esbuild=esbuild or None,
        install=install or None,
        workflow_path=workflow_path,
        templates_path=templates_path,
        repo=settings.repo,
        branch=settings.branch or "main",
        prefer_local=bool(settings.prefer_local),
        mode=settings.mode or "repo",
        use_cache=settings.use_cache is not False,
    )
    if settings.fetch_timeout is not None:
        options.fetch_timeout = settings.fetch_timeout
    if settings.archive_timeout is not None:
        options.archive_timeout = settings.archive_timeout

    try:
        ProjectGenerator().generate(options)
    except MvpGenError as e:
        logger.debug("Generation failed", exc_info=True)
        console.print("[red]Failed to create project[/red]")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise SystemExit(1) from None


@main.group(invoke_without_command=True)
@click.pass_context
def cache(ctx: click.Context) -> None:
    """Manage the template repository cache."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cache.command("info")
@click.option("--debug", is_flag=True, help="List cached repositories.")
def cache_info(debug: bool) -> None:
    """Show cache information."""
    info = CacheManager().info()

    console.print("\n[cyan]Cache Information[/cyan]")
    console.print(f"[dim]Location: {escape(str(info.dir))}[/dim]")
    console.print(f"[dim]Exists: {'Yes' if info.exists else 'No'}[/dim]")

    if info.exists:
        if info.size:
            console.print(f"[dim]Size: {info.size}[/dim]")
        console.print(f"[dim]Cached repositories: {len(info.repositories)}[/dim]")
        if debug and info.repositories:
            console.print("[dim]\nRepository details:[/dim]")
            for index, name in enumerate(info.repositories, 1):
                console.print(f"[dim]  {index}. {name}[/dim]")

    console.print("\n[cyan]Cache Management:[/cyan]")
    console.print("[dim]  mvp-gen cache clean        # Clean all cache[/dim]")
    console.print("[dim]  mvp-gen init --no-cache    # Disable cache for one command[/dim]")
    console.print("[dim]  mvp-gen init --mode archive  # Fetch archives without cache[/dim]")


@cache.command("clean")
@click.option("--force", "-f", is_flag=True, help="Clean without confirmation.")
@click.option("--debug", is_flag=True, help="Show detailed debug information.")
def cache_clean(force: bool, debug: bool) -> None:
    """Remove the cache directory."""
    setup_logging(debug)
    if not force and not click.confirm(
        "Are you sure you want to clean the cache?", default=False
    ):
        console.print("[yellow]Cache clean cancelled.[/yellow]")
        return

    manager = CacheManager()
    try:
        removed = manager.clean()
    except OSError as e:
        console.print(f"[red]Error cleaning cache: {escape(str(e))}[/red]")
        raise SystemExit(1) from None

    if removed:
        console.print(f"[green]Cache cleaned: {escape(str(manager.root))}[/green]")
    else:
        console.print("[dim]Cache directory does not exist, nothing to clean.[/dim]")


@cache.command("path")
def cache_path() -> None:
    """Show the cache directory path."""
    click.echo(str(CacheManager().root))
