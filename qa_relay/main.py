"""
FastAPI application entry point.
"""

import httpx
from fastapi import FastAPI

from qa_relay import __version__
from qa_relay.api import slack_events
from qa_relay.config import Settings, get_settings
from qa_relay.middleware.logging import RequestLoggingMiddleware
from qa_relay.services import (
    ActorResolver,
    ChatNotifier,
    EventDispatcher,
    GitHubClient,
    QAContextResolver,
    SlackClient,
)
from qa_relay.utils.logging import get_logger, setup_logging

settings = get_settings()

# Configure structured logging
setup_logging(settings.log_level)

logger = get_logger(__name__)

app = FastAPI(
    title="QA Relay",
    description="Relays Slack QA thread activity to GitHub pull requests",
    version=__version__,
)

app.add_middleware(RequestLoggingMiddleware)


def build_dispatcher(
    config: Settings,
    slack_http: httpx.AsyncClient,
    github_http: httpx.AsyncClient,
) -> EventDispatcher:
    """Wire the event pipeline from settings and HTTP clients."""
    slack = SlackClient(config.slack_bot_token, slack_http, base_url=config.slack_api_base_url)
    github = GitHubClient(
        config.github_token,
        github_http,
        base_url=config.github_api_base_url,
        user_agent=config.github_user_agent,
    )
    return EventDispatcher(
        slack=slack,
        github=github,
        resolver=QAContextResolver(config.github_repository),
        actors=ActorResolver(slack),
        notifier=ChatNotifier(slack),
    )


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "version": __version__}


app.include_router(slack_events.router)


@app.on_event("startup")
async def startup_event():
    """Create the shared HTTP clients and the event dispatcher."""
    logger.info("Starting QA relay")

    timeout = httpx.Timeout(settings.http_timeout_seconds)
    app.state.slack_http = httpx.AsyncClient(timeout=timeout)
    app.state.github_http = httpx.AsyncClient(timeout=timeout)
    app.state.dispatcher = build_dispatcher(settings, app.state.slack_http, app.state.github_http)

    missing = settings.missing_secrets()
    if missing:
        logger.warning(f"Missing required configuration: {', '.join(missing)}")


@app.on_event("shutdown")
async def shutdown_event():
    """Close the shared HTTP clients."""
    logger.info("Shutting down QA relay")
    await app.state.slack_http.aclose()
    await app.state.github_http.aclose()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
