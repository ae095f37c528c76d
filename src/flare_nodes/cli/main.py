"""
Flare Nodes CLI - Main entry point.

Provides commands for:
- Describing the Flare Network node (resources, operations, parameters)
- Running one batch of the node locally against the Flare API
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from src.flare_nodes.config import get_settings
from src.flare_nodes.observability import setup_logging
from src.node_sdk.basenode import NodeExecutionContext, NodeOperationError
from src.node_sdk.items import NodeItem


# Exit codes
EXIT_ITEM_ERROR = 1
EXIT_CONFIG_ERROR = 2


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool):
    """Flare Nodes - Flare Network workflow node."""
    ctx.ensure_object(dict)

    # Logs go to stderr so stdout stays machine-readable
    setup_logging(stream=sys.stderr)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif quiet:
        logging.getLogger().setLevel(logging.ERROR)

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# ==============================================================================
# Describe
# ==============================================================================

@cli.command("describe")
@click.option("--json", "as_json", is_flag=True, help="Dump the full node definition as JSON")
def describe(as_json: bool):
    """List resources and operations of the Flare Network node."""
    from nodepacks.flare.manifest import node_definitions
    from nodepacks.flare.templates import RESOURCE_DISPLAY_NAMES, RESOURCES, templates_for

    if as_json:
        definitions = [d.model_dump() for d in node_definitions()]
        click.echo(json.dumps(definitions, indent=2, default=str))
        return

    for resource in RESOURCES:
        click.echo(f"{resource} ({RESOURCE_DISPLAY_NAMES[resource]})")
        for template in templates_for(resource).values():
            click.echo(f"  {template.operation:<26} {template.method:<5} {template.path}")


# ==============================================================================
# Run
# ==============================================================================

def _parse_value(raw: str) -> Any:
    """JSON object or array when the text is one, the raw text otherwise."""
    if raw.strip()[:1] not in ("{", "["):
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_params(pairs: Tuple[str, ...], params_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Merge parameters from a JSON file and ``name=value`` pairs.

    Pairs win over the file.
    """
    params: Dict[str, Any] = {}
    if params_file:
        loaded = json.loads(Path(params_file).read_text())
        if not isinstance(loaded, dict):
            raise click.BadParameter("must contain a JSON object", param_hint="--params-file")
        params.update(loaded)

    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {pair!r}", param_hint="-p")
        params[name.strip()] = _parse_value(value)
    return params


def load_items(input_file: Optional[str]) -> List[Dict[str, Any]]:
    """Input items from a JSON file; a single empty item by default."""
    if not input_file:
        return [{"json": {}}]

    data = json.loads(Path(input_file).read_text())
    if not isinstance(data, list):
        data = [data]
    return [item.to_execution_data() for item in NodeItem.from_list(data)]


@cli.command("run")
@click.argument("resource")
@click.argument("operation")
@click.option("--param", "-p", "pairs", multiple=True, help="Node parameter as name=value")
@click.option(
    "--params-file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON object of node parameters",
)
@click.option(
    "--input", "-i", "input_file",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON array of input items",
)
@click.option("--api-key", help="Flare API key (default: FLARE_NODES_API_KEY)")
@click.option("--base-url", help="Flare API base URL")
@click.option("--continue-on-fail", is_flag=True, help="Record item errors instead of stopping")
def run(
    resource: str,
    operation: str,
    pairs: Tuple[str, ...],
    params_file: Optional[str],
    input_file: Optional[str],
    api_key: Optional[str],
    base_url: Optional[str],
    continue_on_fail: bool,
):
    """
    Run one batch of the Flare Network node and print the output records.

    Examples:

        # Current FLR and SGB prices
        flare-nodes run priceFeeds getCurrentPrices -p symbols=FLR,SGB

        # Balance of every address in items.json
        flare-nodes run networkInfo getAddressBalance \\
            -p 'address={{ $json.address }}' -i items.json
    """
    from nodepacks.flare.credentials import CREDENTIAL_TYPE
    from nodepacks.flare.errors import ConfigurationError
    from nodepacks.flare.node import FlareNetworkNode

    settings = get_settings()

    parameters = parse_params(pairs, params_file)
    parameters["resource"] = resource
    parameters["operation"] = operation

    if api_key is None and settings.api_key is not None:
        api_key = settings.api_key.get_secret_value()

    node = FlareNetworkNode()
    node.set_context(
        NodeExecutionContext(
            parameters=parameters,
            credentials={
                CREDENTIAL_TYPE: {
                    "apiKey": api_key or "",
                    "baseUrl": base_url or settings.default_base_url,
                }
            },
            input_data=load_items(input_file),
            continue_on_fail=continue_on_fail,
            node_name="cli",
        )
    )

    try:
        outputs = node.execute()
    except ConfigurationError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    except NodeOperationError as e:
        click.echo(f"Item {e.item_index} failed: {e.message}", err=True)
        sys.exit(EXIT_ITEM_ERROR)

    click.echo(json.dumps(outputs[0], indent=2, default=str))


# ==============================================================================
# Main
# ==============================================================================

def main():
    """Main entry point."""
    cli()


# Alias for entry point
app = cli


if __name__ == "__main__":
    main()
