"""
Example: GitHub webhook receiver

Serves signed push and pull request deliveries on /github, plus a
catch-all route logging every other event.

    HOOKGATE_WEBHOOK_SECRET=s3cr3t python examples/github_receiver.py
"""

from dotenv import load_dotenv
load_dotenv()

import uvicorn

from hookgate import Config, EventKind, WebhookReceiver, configure_logging

config = Config.from_env()
logger = configure_logging(config.log_level)
receiver = WebhookReceiver(config)


@receiver.on(EventKind.PING, path="/github")
async def on_ping(event, payload):
    logger.info(f"Webhook {payload.get('hook_id')} is alive: {payload.get('zen')}")
    return {"pong": True}


@receiver.on(EventKind.PUSH, EventKind.PULL_REQUEST, path="/github")
async def on_code_change(event, payload):
    repo = payload.get("repository", {}).get("full_name", "?")
    if event is EventKind.PUSH:
        logger.info(f"Push to {repo} {payload.get('ref')}")
    else:
        logger.info(f"Pull request #{payload.get('number')} {payload.get('action')} on {repo}")


@receiver.on(EventKind.WILDCARD, path="/github")
async def on_other(event, payload):
    logger.info(f"Ignoring {event.value} delivery")


app = receiver.asgi_app()

if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8080)
