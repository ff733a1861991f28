"""Review command: run the review pipeline on one pull request."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console
from rich.markdown import Markdown

from prscribe_core.events import PullRequestEvent

console = Console()


def _event_for(pr, owner: str, repo: str) -> PullRequestEvent:
    """Build the same event a webhook delivery would carry for this PR."""
    return PullRequestEvent.model_validate(
        {
            "action": "opened",
            "repository": {"owner": {"login": owner}, "name": repo},
            "pull_request": {"number": pr.number, "title": pr.title or "", "head": {"sha": pr.head.sha}},
        }
    )


async def _shadow_review(pipeline, event: PullRequestEvent) -> str:
    from prscribe_core.collector import collect
    from prscribe_core.formatter import format_review

    records, commit_messages = await collect(pipeline.host, event.owner, event.repo, event.number, event.head_sha)
    console.print(f"[dim]Collected {len(records)} file(s) and {len(commit_messages)} commit(s).[/dim]")
    result = await pipeline.engine.analyze(event.title, records, commit_messages)
    return format_review(result, pipeline.comments.heading)


@click.command("review")
@click.option("--repo", required=True, help="GitHub repository in owner/name format.")
@click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
@click.option(
    "--model",
    type=click.Choice(["anthropic", "openai"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option(
    "--guidelines",
    "guidelines_path",
    default=None,
    help="Path to a Markdown file with review focus areas. Overrides config file.",
)
@click.option(
    "--shadow",
    "-s",
    is_flag=True,
    help="Dry-run mode: print the review instead of commenting on the PR.",
)
@click.pass_context
def review_cmd(ctx, repo: str, pr_number: int, model: str | None, guidelines_path: str | None, shadow: bool):
    """Review a single pull request now.

    Posts the same placeholder-then-review comment the webhook server does,
    or with --shadow prints the rendered review to the terminal.
    """
    from prscribe_cli.auth import resolve_github_token
    from prscribe_core.config import ConfigError, validate_config
    from prscribe_core.pipeline import ReviewPipeline

    config = dict(ctx.obj["config"])
    for key, value in (("model", model), ("guidelines", guidelines_path)):
        if value is not None:
            config[key] = value

    if "/" not in repo:
        raise click.BadParameter("expected owner/name", param_hint="--repo")
    owner, name = repo.split("/", 1)

    token = resolve_github_token(config)
    if token:
        config["github_token"] = token
    try:
        validate_config(config)
    except ConfigError as e:
        raise click.UsageError(str(e))

    pipeline = ReviewPipeline.from_config(config)
    pr = pipeline.host.get_pull(owner, name, pr_number)
    event = _event_for(pr, owner, name)

    if shadow:
        body = asyncio.run(_shadow_review(pipeline, event))
        console.print(Markdown(body))
        console.print("[bold]Shadow review complete. Nothing was posted.[/bold]")
        return

    console.print(f"Reviewing {event.label}...")
    asyncio.run(pipeline.on_pull_request_opened(event))
    console.print(f"[green]Review for {event.label} finished.[/green]")
