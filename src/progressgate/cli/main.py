"""ProgressGate CLI -- prerequisite resolution and corpus validation for game progression.

Entry point for the ``progressgate`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    validate     -- Statically validate an entity corpus.
    check        -- Resolve one entity's prerequisites against a snapshot.
    can-perform  -- Decide whether an action can be performed from a snapshot.
    graph        -- Show dependency graph statistics or one entity's chain.

Usage::

    progressgate validate corpus.yaml
    progressgate validate corpus.yaml --strict --format json
    progressgate check corpus.yaml till_soil --snapshot player.yaml
    progressgate can-perform corpus.yaml --snapshot player.yaml --kind purchase --target hoe
    progressgate graph corpus.yaml
    progressgate graph corpus.yaml till_soil
"""

from __future__ import annotations

import logging

import click

from progressgate import __version__
from progressgate.cli.action_cmd import can_perform_command
from progressgate.cli.check_cmd import check_command
from progressgate.cli.graph_cmd import graph_command
from progressgate.cli.validate_cmd import validate_command


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """ProgressGate: prerequisite resolution for game progression.

    Validate entity corpora, resolve prerequisites against progression
    snapshots, and decide whether player actions can be performed.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register all subcommands
cli.add_command(validate_command)
cli.add_command(check_command)
cli.add_command(can_perform_command)
cli.add_command(graph_command)
