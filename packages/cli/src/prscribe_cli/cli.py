"""CLI entry point for prscribe.

Commands:
  serve    run the GitHub webhook server that reviews newly opened PRs
  review   run the same review by hand on one pull request
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from dotenv import load_dotenv
from rich.logging import RichHandler

from prscribe_cli.commands.review import review_cmd
from prscribe_cli.commands.serve import serve_cmd


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prscribe"),
    prog_name="prscribe",
)
@click.option(
    "--config",
    "config_path",
    default=".prscribe.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRSCRIBE_CONFIG",
)
@click.option("--log-level", default=None, help="Logging level. Overrides config file.")
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str | None):
    """AI pull request reviewer that posts its analysis as a PR comment."""
    from prscribe_core.config import load_config

    # .env.local wins over .env; neither overrides variables already exported.
    load_dotenv(".env.local")
    load_dotenv()

    ctx.ensure_object(dict)
    config = load_config(config_path, cli_overrides={"log_level": log_level})
    configure_logging(config["log_level"])
    ctx.obj["config"] = config


main.add_command(serve_cmd)
main.add_command(review_cmd)
