from fastapi import FastAPI

from prscribe_server import webhook


def create_app(pipeline, webhook_secret: str | None = None) -> FastAPI:
    """
    Build the webhook application around an already-constructed pipeline.

    The pipeline (GitHub client, model provider, comment manager) is created
    once at startup and shared by every delivery; tests pass a fake one.
    """
    app = FastAPI(title="prscribe", description="AI pull request reviewer webhook")
    app.state.pipeline = pipeline
    app.state.webhook_secret = webhook_secret
    app.include_router(webhook.router)
    return app
