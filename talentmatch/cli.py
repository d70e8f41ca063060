#!/usr/bin/env python3
"""
TalentMatch CLI - command-line interface for ranking candidates against jobs.
"""

import click
from rich.console import Console
from rich.table import Table

from . import __version__

console = Console()


def _get_engine(ctx):
    from .engine import get_matching_engine

    if "engine" not in ctx.obj:
        use_remote = False if ctx.obj.get("local") else None
        ctx.obj["engine"] = get_matching_engine(use_remote=use_remote)
    return ctx.obj["engine"]


def _truncate(text, width):
    if text and len(text) > width:
        return text[:width - 3] + "..."
    return text or ""


def _candidate_table(title, candidates, limit=None):
    table = Table(title=title)
    table.add_column("ID", style="cyan", width=6)
    table.add_column("Name", style="bold")
    table.add_column("Skills", style="green")

    for candidate in candidates[:limit] if limit else candidates:
        table.add_row(candidate.id, candidate.name, _truncate(candidate.skills, 60))
    return table


@click.group()
@click.version_option(version=__version__)
@click.option("--local", is_flag=True, help="Skip the remote matching service and use local data only")
@click.pass_context
def main(ctx, local):
    """TalentMatch - rank candidate profiles against job descriptions."""
    ctx.ensure_object(dict)
    ctx.obj["local"] = local


@main.group()
def jobs():
    """Manage job postings."""
    pass


@jobs.command("list")
@click.option("--limit", type=int, help="Maximum jobs to display")
@click.pass_context
def list_jobs(ctx, limit):
    """List job postings."""
    from .config import get_config_manager

    try:
        engine = _get_engine(ctx)
        all_jobs = engine.list_jobs()

        if not all_jobs:
            console.print("[yellow]No jobs found[/yellow]")
            return

        limit = limit or get_config_manager().get('cli', 'default_table_limit')
        display_jobs = all_jobs[:limit]

        table = Table(title=f"Job Listings ({len(display_jobs)} of {len(all_jobs)})")
        table.add_column("ID", style="cyan", width=6)
        table.add_column("Title", style="bold")
        table.add_column("Description", style="green")

        for job in display_jobs:
            table.add_row(job.id, _truncate(job.title, 40), _truncate(job.description, 60))

        console.print(table)

    except Exception as e:
        console.print(f"[red]Error listing jobs: {e}[/red]")
        raise click.Abort()


@jobs.command("add")
@click.option("--title", required=True, help="Job title")
@click.option("--description", required=True, help="Job description")
@click.pass_context
def add_job(ctx, title, description):
    """Create a job posting."""
    try:
        engine = _get_engine(ctx)
        job = engine.create_job(title, description)
        console.print(f"[green]✓ Job created successfully (ID: {job.id})[/green]")

    except Exception as e:
        console.print(f"[red]Error creating job: {e}[/red]")
        raise click.Abort()


@main.group()
def candidates():
    """Manage candidate profiles."""
    pass


@candidates.command("list")
@click.option("--limit", type=int, help="Maximum candidates to display")
@click.pass_context
def list_candidates(ctx, limit):
    """List candidate profiles."""
    try:
        engine = _get_engine(ctx)
        all_candidates = engine.list_candidates()

        if not all_candidates:
            console.print("[yellow]No candidates found[/yellow]")
            return

        console.print(_candidate_table(f"Candidates ({len(all_candidates)})", all_candidates, limit))

    except Exception as e:
        console.print(f"[red]Error listing candidates: {e}[/red]")
        raise click.Abort()


@candidates.command("add")
@click.option("--name", required=True, help="Candidate name")
@click.option("--skills", required=True, help="Candidate skills")
@click.option("--summary", help="Optional profile summary")
@click.pass_context
def add_candidate(ctx, name, skills, summary):
    """Create a candidate profile."""
    try:
        engine = _get_engine(ctx)
        candidate = engine.create_candidate(name, skills, summary)
        console.print(f"[green]✓ Candidate created successfully (ID: {candidate.id})[/green]")

    except Exception as e:
        console.print(f"[red]Error creating candidate: {e}[/red]")
        raise click.Abort()


@candidates.command("search")
@click.argument("name", default="")
@click.pass_context
def search_candidates(ctx, name):
    """Search candidates by name."""
    try:
        engine = _get_engine(ctx)
        found = engine.search_candidates(name)

        if not found:
            console.print(f"[yellow]No candidates matching '{name}'[/yellow]")
            return

        console.print(_candidate_table(f"Search Results ({len(found)})", found))

    except Exception as e:
        console.print(f"[red]Error searching candidates: {e}[/red]")
        raise click.Abort()


@main.group()
def match():
    """Rank candidates against jobs."""
    pass


def _match_table(title: str, results, with_names: bool = True) -> Table:
    from .config import get_config_manager

    precision = get_config_manager().get('matching', 'score_precision')

    table = Table(title=title)
    table.add_column("Rank", style="dim", width=5)
    table.add_column("ID", style="cyan", width=6)
    if with_names:
        table.add_column("Name", style="bold")
    table.add_column("Score", style="yellow")

    for rank, result in enumerate(results, start=1):
        score = f"{result.score:.{precision}f}" if result.score is not None else "N/A"
        row = [str(rank), str(result.item_id)]
        if with_names:
            row.append(result.candidate.name if result.candidate else "")
        table.add_row(*row, score)

    return table


def _export_outcome(outcome, export_path, export_format):
    if export_path or export_format:
        from .export import get_export_manager
        get_export_manager().export_match_results(outcome, export_format, export_path)


@match.command("run")
@click.argument("job_id")
@click.option("--top-k", "-k", type=int, help="Number of candidates to return")
@click.option("--local", "local_only", is_flag=True, help="Skip the remote service for this match")
@click.option("--export", "export_path", type=click.Path(), help="Export results to file")
@click.option("--format", "export_format", type=click.Choice(["csv", "json"]),
              help="Export format (default from configuration)")
@click.pass_context
def run_match(ctx, job_id, top_k, local_only, export_path, export_format):
    """Find the best candidates for a job."""
    try:
        engine = _get_engine(ctx)
        outcome = engine.run_match(job_id, k=top_k, local_only=local_only)

        if not outcome.results:
            console.print(f"[yellow]No matches found for job {job_id}[/yellow]")
            return

        console.print(_match_table(f"Top Matches for Job {job_id} ({outcome.source})", outcome.results))
        _export_outcome(outcome, export_path, export_format)

    except Exception as e:
        console.print(f"[red]Error running match: {e}[/red]")
        raise click.Abort()


@match.command("text")
@click.argument("job_text")
@click.option("--candidate", "-c", "candidate_specs", multiple=True,
              help="Candidate as ID=TEXT (repeatable). Without it, stored candidates are ranked")
@click.option("--top-k", "-k", type=int, help="Number of candidates to return")
@click.option("--local", "local_only", is_flag=True, help="Skip the remote service for this match")
@click.option("--export", "export_path", type=click.Path(), help="Export results to file")
@click.option("--format", "export_format", type=click.Choice(["csv", "json"]),
              help="Export format (default from configuration)")
@click.pass_context
def match_text(ctx, job_text, candidate_specs, top_k, local_only, export_path, export_format):
    """
    Rank candidates against a free-text job description.

    With --candidate, the given texts are ranked locally. Otherwise the
    description goes to the matching service, falling back to the stored
    candidates.
    """
    from .config import get_config_manager
    from .embeddings import get_encoder
    from .matching import score_candidates, validate_k

    try:
        pairs = []
        for entry in candidate_specs:
            if "=" not in entry:
                raise click.BadParameter(f"Expected ID=TEXT, got '{entry}'", param_hint="--candidate")
            item_id, text = entry.split("=", 1)
            pairs.append((item_id.strip(), text))

        if not pairs:
            outcome = _get_engine(ctx).match_description(job_text, k=top_k, local_only=local_only)
            if not outcome.results:
                console.print("[yellow]No matches found for the description[/yellow]")
                return
            console.print(_match_table(f"Top Matches ({outcome.source})", outcome.results))
            _export_outcome(outcome, export_path, export_format)
            return

        k = validate_k(get_config_manager().get('matching', 'top_k') if top_k is None else top_k)
        encoder = get_encoder()
        query = encoder.encode(job_text)
        results = score_candidates(query, [(item_id, encoder.encode(text)) for item_id, text in pairs])[:k]

        console.print(_match_table("Top Matches", results, with_names=False))

    except click.BadParameter:
        raise
    except Exception as e:
        console.print(f"[red]Error matching text: {e}[/red]")
        raise click.Abort()


@main.command("encode")
@click.argument("text")
@click.option("--precision", type=int, default=4, show_default=True, help="Decimal places to show")
def encode_text(text, precision):
    """Show the embedding for a piece of text."""
    from .embeddings import get_encoder

    try:
        vector = get_encoder().encode(text)
        values = ", ".join(f"{value:.{precision}f}" for value in vector)
        console.print(f"[cyan]Embedding ({len(vector)} dimensions):[/cyan]")
        console.print(f"[{values}]", markup=False)

    except Exception as e:
        console.print(f"[red]Error encoding text: {e}[/red]")
        raise click.Abort()


@main.group()
def config():
    """Configure system settings."""
    pass


@config.command("show")
@click.option("--section", help="Show specific configuration section only")
def show_config(section):
    """Display current configuration."""
    from .config import get_config_manager

    try:
        config_manager = get_config_manager()

        if section and not config_manager.get(section):
            console.print(f"[red]Configuration section '{section}' not found[/red]")
            return

        config_manager.display_config(section)

    except Exception as e:
        console.print(f"[red]Error showing configuration: {e}[/red]")
        raise click.Abort()


@config.command("set")
@click.argument("section")
@click.argument("key")
@click.argument("value")
def set_config(section, key, value):
    """Set configuration value (format: section key value)."""
    from .config import get_config_manager

    try:
        config_manager = get_config_manager()

        # Convert value to the type of the existing setting
        existing_value = config_manager.get(section, key)
        if existing_value is not None:
            try:
                value = config_manager._coerce(value, existing_value)
            except ValueError:
                console.print(f"[red]Invalid {type(existing_value).__name__} value: {value}[/red]")
                return

        if config_manager.set(section, key, value):
            console.print(f"[green]✓ Set {section}.{key} = {value}[/green]")
        else:
            console.print("[red]✗ Failed to set configuration[/red]")

    except Exception as e:
        console.print(f"[red]Error setting configuration: {e}[/red]")
        raise click.Abort()


@config.command("env")
@click.argument("key")
@click.argument("value")
def set_env_var(key, value):
    """Set environment variable in .env file."""
    from .config import get_config_manager

    try:
        if get_config_manager().set_env_var(key, value):
            console.print(f"[green]✓ Set environment variable {key} = {value}[/green]")
            console.print("[dim]Configuration reloaded with new environment variable[/dim]")
        else:
            console.print("[red]✗ Failed to set environment variable[/red]")

    except Exception as e:
        console.print(f"[red]Error setting environment variable: {e}[/red]")
        raise click.Abort()


@config.command("unset")
@click.argument("key")
def unset_env_var(key):
    """Remove environment variable from .env file."""
    from .config import get_config_manager

    try:
        if get_config_manager().unset_env_var(key):
            console.print(f"[green]✓ Removed environment variable {key}[/green]")
        else:
            console.print("[red]✗ Failed to remove environment variable[/red]")

    except Exception as e:
        console.print(f"[red]Error removing environment variable: {e}[/red]")
        raise click.Abort()


@config.command("validate")
def validate_config():
    """Validate current configuration."""
    from .config import get_config_manager

    try:
        issues = get_config_manager().validate_config()

        if not issues:
            console.print("[green]✓ Configuration validation passed[/green]")
        else:
            console.print("[red]Configuration validation failed:[/red]")
            for issue in issues:
                console.print(f"[red]• {issue}[/red]")

    except Exception as e:
        console.print(f"[red]Error validating configuration: {e}[/red]")
        raise click.Abort()


@config.command("reset")
@click.option("--confirm", is_flag=True, help="Skip confirmation prompt")
def reset_config(confirm):
    """Reset configuration to default values."""
    from .config import get_config_manager

    try:
        if not confirm:
            if not click.confirm("Reset all configuration to defaults?"):
                console.print("[yellow]Reset cancelled[/yellow]")
                return

        if get_config_manager().reset_to_defaults():
            console.print("[green]✓ Configuration reset to defaults[/green]")
        else:
            console.print("[red]✗ Failed to reset configuration[/red]")

    except Exception as e:
        console.print(f"[red]Error resetting configuration: {e}[/red]")
        raise click.Abort()


@config.command("template")
@click.option("--output", "-o", help="Output file path")
def export_template(output):
    """Export .env template file."""
    from .config import get_config_manager

    try:
        if get_config_manager().export_env_template(output):
            console.print("[cyan]Edit the template file and rename to .env to use[/cyan]")

    except Exception as e:
        console.print(f"[red]Error exporting template: {e}[/red]")
        raise click.Abort()


@main.command("status")
@click.pass_context
def status(ctx):
    """Show remote service, store and encoder status."""
    console.print("[bold green]TalentMatch System Status[/bold green]")

    table = Table(title="System Overview")
    table.add_column("Component", style="cyan", no_wrap=True)
    table.add_column("Status", style="magenta")
    table.add_column("Details", style="green")

    try:
        info = _get_engine(ctx).get_status()

        if not info["remote_enabled"]:
            table.add_row("Remote service", "Disabled", "Using local data only")
        elif info["remote_reachable"]:
            table.add_row("Remote service", "Online", info["remote_url"])
        else:
            table.add_row("Remote service", "Offline", f"{info['remote_url']} (local fallback active)")

        table.add_row("Jobs", str(info["store"]["jobs"]), "Local sample jobs")
        table.add_row("Candidates", str(info["store"]["candidates"]), "Local sample candidates")
        table.add_row("Encoder", "Ready",
                      f"{info['encoder']['encoder']} ({info['encoder']['dimension']} dimensions)")
        table.add_row("Top K", str(info["top_k"]), "Default matches per job")
    except Exception as e:
        table.add_row("System", "Error", f"Status check failed: {str(e)[:50]}")

    console.print(table)


if __name__ == "__main__":
    main()
