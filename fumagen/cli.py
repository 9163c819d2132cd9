# cli.py - Command line interface for Fumagen
"""
Fumagen CLI - Build the HITSZ-OpenAuto Fumadocs content tree

COMMANDS:
    Pipeline:
        fumagen fetch [--concurrency N]       Download READMEs and worktree manifests
        fumagen generate                      Write course pages, indexes and meta.json
        fumagen format [DIR]                  Rewrite .mdx files into valid MDX
        fumagen build                         fetch + generate + format

    Tools:
        fumagen tree MANIFEST --repo REPO     Print the download tree JSX of one manifest

    Other:
        fumagen init [--force]                Write a fumagen.yaml template
        fumagen version                       Show version information

EXAMPLES:
    # Full build with progress output
    fumagen -v build

    # Regenerate pages from already downloaded data
    fumagen generate && fumagen format

    # Inspect one repository's file tree
    fumagen tree repos/COMP1011.json --repo COMP1011
"""

import functools
import sys
from pathlib import Path
from typing import Optional

import click

from fumagen import __version__
from fumagen.config_utils import CONFIG_FILE_NAME, FumagenConfig, create_config_template, get_config
from fumagen.errors import FumagenError, missing_directory_error, missing_token_error
from fumagen.fetcher import fetch_all_repos, resolve_github_token
from fumagen.generator import GenerationStats, generate_course_pages
from fumagen.icons import fence, icons
from fumagen.loader import (
    load_all_plans,
    load_grades_summary,
    load_repos_list,
    load_shared_categories,
    load_worktree,
)
from fumagen.log_utils import setup_logging
from fumagen.mdx import format_all_mdx_files
from fumagen.special_categories import generate_special_category_pages
from fumagen.tree import build_file_tree, tree_to_jsx


# ============================================================================
# Configuration & Utilities
# ============================================================================

class FumagenContext:
    """Shared context for CLI commands"""

    def __init__(self, project_root: Optional[Path] = None):
        self.project_root = Path(project_root) if project_root else Path.cwd()
        self._config: Optional[FumagenConfig] = None

    @property
    def config(self) -> FumagenConfig:
        if self._config is None:
            self._config = get_config(self.project_root)
        return self._config


def handle_errors(func):
    """Print FumagenError messages and exit 1 instead of a traceback."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except FumagenError as e:
            click.echo(str(e), err=True)
            sys.exit(1)
    return wrapper


def run_fetch(ctx: FumagenContext, concurrency: Optional[int] = None, require_token: bool = True) -> bool:
    """Fetch step shared by `fetch` and `build`; False if it was skipped."""
    config = ctx.config

    token = resolve_github_token()
    if not token:
        if require_token:
            raise missing_token_error()
        click.echo(f"{icons.SKIP} No GitHub token found, skipping fetch")
        return False

    repos = load_repos_list(ctx.project_root)
    if not repos:
        click.echo(f"{icons.WARNING} repos_list.txt is empty or missing, nothing to fetch")
        return False

    click.echo(f"{icons.DOWNLOAD} Fetching {len(repos)} repositories into {config.repos_path}")
    succeeded, failed = fetch_all_repos(
        token,
        config.org,
        repos,
        config.repos_path,
        concurrency or config.concurrency,
    )
    icon = icons.SUCCESS if not failed else icons.WARNING
    click.echo(f"{icon} Fetch complete: {succeeded} succeeded, {failed} failed")
    return True


def run_generate(ctx: FumagenContext) -> GenerationStats:
    config = ctx.config
    data_dir = config.data_path
    docs_dir = config.docs_path

    plans = load_all_plans(data_dir)
    shared = load_shared_categories(data_dir)
    grades_summary = load_grades_summary(data_dir)
    repos_set = load_repos_list(ctx.project_root)

    click.echo(f"{icons.BOOKS} Loaded {len(plans)} training plans")

    stats = generate_course_pages(
        plans,
        shared.categories,
        shared.no_course_info_repo_ids,
        grades_summary,
        config.repos_path,
        docs_dir,
        repos_set,
        config,
    )
    stats.merge(generate_special_category_pages(config.repos_path, docs_dir, repos_set, config))

    click.echo(f"{icons.PAGE} {stats.course_pages} course pages, {stats.index_pages} index pages")
    click.echo(f"{icons.FOLDER} {stats.meta_files} meta.json files in {docs_dir}")
    if stats.skipped_courses:
        click.echo(f"{icons.SKIP} {stats.skipped_courses} courses skipped (no README downloaded)")
    return stats


def run_format(docs_dir: Path) -> int:
    if not docs_dir.is_dir():
        raise missing_directory_error(docs_dir)

    click.echo(f"{icons.SWEEP} Formatting MDX files in {docs_dir}")
    count = format_all_mdx_files(docs_dir)
    click.echo(f"{icons.EDIT} Formatted {count} files")
    return count


# ============================================================================
# CLI Group
# ============================================================================

@click.group()
@click.option('--verbose', '-v', count=True, help='Show progress (-v) or debug detail (-vv)')
@click.option('--project-dir', type=click.Path(file_okay=False, path_type=Path),
              help='Project root (default: current directory)')
@click.pass_context
def cli(ctx, verbose: int, project_dir: Optional[Path]):
    """
    Fumagen - Fumadocs site generator for HITSZ-OpenAuto

    Turns training plans and course repositories into MDX pages.
    """
    setup_logging(verbose)
    ctx.obj = FumagenContext(project_dir)


# ============================================================================
# Pipeline Commands
# ============================================================================

@cli.command()
@click.option('--concurrency', '-j', type=click.IntRange(min=1), help='Parallel downloads')
@click.pass_obj
@handle_errors
def fetch(ctx: FumagenContext, concurrency: Optional[int]):
    """
    Download course READMEs and worktree manifests from GitHub

    Reads repository names from repos_list.txt. Files already present in
    the repos directory are kept; delete them to download again.

    The token comes from PERSONAL_ACCESS_TOKEN, GITHUB_TOKEN or `gh auth token`.
    """
    run_fetch(ctx, concurrency)


@cli.command()
@click.pass_obj
@handle_errors
def generate(ctx: FumagenContext):
    """
    Generate course pages, index pages and meta.json files
    """
    run_generate(ctx)
    click.echo(f"{icons.SUCCESS} Generation complete")


@cli.command('format')
@click.argument('directory', required=False, type=click.Path(file_okay=False, path_type=Path))
@click.pass_obj
@handle_errors
def format_command(ctx: FumagenContext, directory: Optional[Path]):
    """
    Rewrite .mdx files into valid MDX

    Removes HTML comments and shields.io badges, fixes legacy HTML,
    converts Hugo shortcodes to accordions and escapes braces in math.
    Defaults to the configured docs directory.
    """
    run_format(directory or ctx.config.docs_path)


@cli.command()
@click.option('--skip-fetch', is_flag=True, help='Use already downloaded repository data')
@click.pass_obj
@handle_errors
def build(ctx: FumagenContext, skip_fetch: bool):
    """
    Run fetch, generate and format in order

    Fetching is skipped when no GitHub token is available.
    """
    if not skip_fetch:
        fence("Fetching repositories")
        run_fetch(ctx, require_token=False)

    fence("Generating pages")
    run_generate(ctx)

    fence("Formatting MDX")
    run_format(ctx.config.docs_path)

    click.echo()
    click.echo(f"{icons.SUCCESS} Build complete")


# ============================================================================
# Tools
# ============================================================================

@cli.command()
@click.argument('manifest', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--repo', required=True, help='Repository name used in download URLs')
@click.pass_obj
@handle_errors
def tree(ctx: FumagenContext, manifest: Path, repo: str):
    """
    Print the <Folder>/<File> JSX for a worktree manifest
    """
    config = ctx.config
    nodes = build_file_tree(load_worktree(manifest), repo, config.mirror_host, config.org)
    click.echo(tree_to_jsx(nodes, 0))


# ============================================================================
# Setup
# ============================================================================

@cli.command()
@click.option('--force', is_flag=True, help='Overwrite an existing fumagen.yaml')
@click.pass_obj
def init(ctx: FumagenContext, force: bool):
    """
    Write a commented fumagen.yaml into the project root
    """
    yaml_path = ctx.project_root / CONFIG_FILE_NAME
    if yaml_path.exists() and not force:
        click.echo(f"{icons.WARNING} {CONFIG_FILE_NAME} already exists (use --force to overwrite)")
        return

    yaml_path.write_text(create_config_template(), encoding="utf-8")
    click.echo(f"{icons.SUCCESS} Created {yaml_path}")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Edit data_dir / repos_dir / docs_dir if your layout differs")
    click.echo("  2. List course repositories in repos_list.txt")
    click.echo("  3. Run: fumagen build")


# ============================================================================
# Version
# ============================================================================

@cli.command()
def version():
    """Show Fumagen version"""
    click.echo(f"Fumagen v{__version__}")
    click.echo("Fumadocs content generator for HITSZ-OpenAuto")


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == '__main__':
    cli()
