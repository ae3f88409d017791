from __future__ import annotations

"""Command line for driving the SPARQL recipes by hand."""

import json
import sys
from dataclasses import asdict
from pathlib import Path

import click
import requests
from tabulate import tabulate

from sparqlRecipes import __version__
from sparqlRecipes import checks as recipe_checks
from sparqlRecipes import fixtures
from sparqlRecipes.config import Settings, load_settings
from sparqlRecipes.errors import SparqlRecipesError
from sparqlRecipes.fedora import FedoraClient
from sparqlRecipes.fuseki import build_fuseki_cmd, running_fuseki
from sparqlRecipes.sparql import FusekiClient


def _render_results(results: list[recipe_checks.CheckResult]) -> str:
    rows = [
        (r.name, "ok" if r.passed else "FAIL", _short(r.expected), _short(r.actual))
        for r in results
    ]
    return tabulate(rows, headers=["Recipe", "Result", "Expected", "Actual"])


def _short(value) -> str:
    if isinstance(value, (set, frozenset)):
        value = sorted(value)
    return json.dumps(value, default=list)


def _run_checks(settings: Settings) -> list[recipe_checks.CheckResult]:
    fedora = FedoraClient(settings)
    fuseki = FusekiClient(settings)
    try:
        checks = recipe_checks.build_checks(fedora.uri_for_pid, settings.profile)
        return recipe_checks.run_checks(fuseki, checks)
    finally:
        fedora.close()
        fuseki.close()


@click.group()
@click.version_option(__version__)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file (defaults to $SPARQL_RECIPES_CONFIG).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Check Fedora to Fuseki indexing with the SPARQL recipes."""
    ctx.obj = load_settings(config_path)


@cli.command(name="config")
@click.pass_obj
def show_config(settings: Settings) -> None:
    """Print the effective settings and Fedora REST profile."""
    payload = {"settings": settings.as_dict(), "profile": asdict(settings.profile)}
    click.echo(json.dumps(payload, sort_keys=True, indent=2))


@cli.command(name="fuseki-cmd")
@click.pass_obj
def fuseki_cmd(settings: Settings) -> None:
    """Print the Fuseki command line."""
    cmd = build_fuseki_cmd(settings.fuseki_port, settings.fuseki_mgt_port, settings.fuseki_dataset)
    click.echo(" ".join(cmd))


@cli.command()
@click.pass_obj
def status(settings: Settings) -> None:
    """Show whether Fuseki and Fedora are answering."""
    fuseki = FusekiClient(settings)
    fedora = FedoraClient(settings)
    rows = []
    healthy = True
    for name, url, get_status in (
        ("fuseki", settings.fuseki_base_url, fuseki.status),
        ("fedora", settings.fedora_base_url, fedora.status),
    ):
        try:
            code = get_status()
        except requests.RequestException as exc:
            code = f"error: {exc.__class__.__name__}"
        healthy &= code == 200
        rows.append((name, url, code))
    fuseki.close()
    fedora.close()
    click.echo(tabulate(rows, headers=["Service", "URL", "Status"]))
    if not healthy:
        sys.exit(1)


@cli.command()
@click.option("--no-wait", is_flag=True, default=False, help="Skip the wait for indexing.")
@click.pass_obj
def populate(settings: Settings, no_wait: bool) -> None:
    """Create the recipes object graph in Fedora."""
    fedora = FedoraClient(settings)
    try:
        fixtures.setup_test_objects(fedora, settings.profile, settings, wait=not no_wait)
    except SparqlRecipesError as exc:
        raise click.ClickException(str(exc))
    except requests.RequestException as exc:
        raise click.ClickException(f"Fedora unreachable: {exc}")
    finally:
        fedora.close()
    click.echo(f"populated {fedora.base_url}")


@cli.command()
@click.argument("sparql")
@click.option("--column", default=None, help="Print only the values of this variable.")
@click.pass_obj
def query(settings: Settings, sparql: str, column: str | None) -> None:
    """Run an ad hoc SELECT query against the Fuseki dataset."""
    fuseki = FusekiClient(settings)
    try:
        response = fuseki.select(sparql)
    except SparqlRecipesError as exc:
        raise click.ClickException(str(exc))
    except requests.RequestException as exc:
        raise click.ClickException(f"Fuseki unreachable: {exc}")
    finally:
        fuseki.close()
    if column:
        for value in response.values(column):
            click.echo(value)
        return
    click.echo(tabulate(response.rows[1:], headers=response.header))


@cli.command()
@click.pass_obj
def check(settings: Settings) -> None:
    """Run every recipe against Fuseki and report mismatches."""
    try:
        results = _run_checks(settings)
    except SparqlRecipesError as exc:
        raise click.ClickException(str(exc))
    except requests.RequestException as exc:
        raise click.ClickException(f"Fuseki unreachable: {exc}")
    click.echo(_render_results(results))
    if not all(r.passed for r in results):
        sys.exit(1)


@cli.command()
@click.option("--skip-populate", is_flag=True, default=False, help="Assume Fedora already holds the objects.")
@click.pass_obj
def run(settings: Settings, skip_populate: bool) -> None:
    """Start Fuseki, populate Fedora, run the checks and stop Fuseki."""
    try:
        with running_fuseki(settings):
            if not skip_populate:
                fedora = FedoraClient(settings)
                try:
                    fixtures.setup_test_objects(fedora, settings.profile, settings)
                finally:
                    fedora.close()
            results = _run_checks(settings)
    except SparqlRecipesError as exc:
        raise click.ClickException(str(exc))
    except requests.RequestException as exc:
        raise click.ClickException(f"Service unreachable: {exc}")
    click.echo(_render_results(results))
    if not all(r.passed for r in results):
        sys.exit(1)


def main() -> None:  # pragma: no cover - console script entry
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
