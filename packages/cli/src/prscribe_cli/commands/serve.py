"""Serve command: run the webhook server."""

from __future__ import annotations

import logging

import click
import uvicorn

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option("--host", default=None, help="Interface to bind. Overrides config file.")
@click.option("--port", type=int, default=None, help="Port to listen on. Overrides config file and PORT.")
@click.pass_context
def serve_cmd(ctx, host: str | None, port: int | None):
    """Listen for GitHub webhooks and review every newly opened pull request.

    \b
    Required environment variables:
      GITHUB_APP_ID, GITHUB_PRIVATE_KEY, GITHUB_INSTALLATION_ID
                           GitHub App credentials (or GITHUB_TOKEN instead)
      ANTHROPIC_API_KEY    Required when model is anthropic
      OPENAI_API_KEY       Required when model is openai
    Optional:
      GITHUB_WEBHOOK_SECRET  Verify X-Hub-Signature-256 on every delivery
    """
    from prscribe_core.config import ConfigError, validate_config
    from prscribe_core.pipeline import ReviewPipeline
    from prscribe_server.app import create_app

    config = ctx.obj["config"]
    try:
        validate_config(config)
    except ConfigError as e:
        raise click.UsageError(str(e))

    if not config.get("webhook_secret"):
        logger.warning("GITHUB_WEBHOOK_SECRET is not set; webhook signatures will not be verified.")

    app = create_app(ReviewPipeline.from_config(config), webhook_secret=config.get("webhook_secret"))
    bind_host = host or config["host"]
    bind_port = port or int(config["port"])
    logger.info("PR review bot listening on %s:%d", bind_host, bind_port)
    uvicorn.run(app, host=bind_host, port=bind_port, log_config=None)
