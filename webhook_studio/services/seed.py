"""Default categories and webhooks inserted into an empty database."""
from __future__ import annotations

import json
import logging

from sqlalchemy.orm import Session

from webhook_studio.schemas.category import CategoryCreate
from webhook_studio.schemas.webhook import ExamplePayload, WebhookCreate, WebhookHeader
from webhook_studio.services.category_repository import CategoryRepository
from webhook_studio.services.webhook_repository import WebhookRepository

logger = logging.getLogger(__name__)


def _pretty(value: dict) -> str:
    return json.dumps(value, indent=2)


_GITHUB_PUSH = {
    "event": "push",
    "repository": "user/repo",
    "branch": "main",
    "commit": {"id": "abc123", "message": "Update README.md", "author": "username"},
}
_GITHUB_ISSUE = {
    "event": "issue",
    "action": "created",
    "repository": "user/repo",
    "issue": {
        "id": 123456,
        "title": "Bug in login functionality",
        "body": "There seems to be an issue with...",
        "reporter": "username",
    },
}
_SLACK_SIMPLE = {
    "text": "Hello from Webhook Studio!",
    "channel": "#general",
    "username": "Webhook Bot",
    "icon_emoji": ":rocket:",
}
_SLACK_RICH = {
    "text": "New deployment completed",
    "blocks": [
        {"type": "header", "text": {"type": "plain_text", "text": "Deployment Successful", "emoji": True}},
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": "*Project:* Application\n*Environment:* Production\n*Version:* v1.2.0",
            },
        },
    ],
    "channel": "#deployments",
    "username": "Deploy Bot",
    "icon_emoji": ":rocket:",
}
_HUBSPOT_BASIC = {
    "properties": {
        "email": "contact@example.com",
        "firstname": "John",
        "lastname": "Doe",
        "phone": "123-456-7890",
        "company": "Acme Inc",
    }
}
_HUBSPOT_DETAILED = {
    "properties": {
        "email": "jane@company.com",
        "firstname": "Jane",
        "lastname": "Smith",
        "phone": "987-654-3210",
        "company": "Globex Corp",
        "jobtitle": "Marketing Director",
        "website": "www.company.com",
        "address": "123 Main Street",
        "city": "Boston",
        "state": "MA",
        "zip": "02108",
    }
}

DEFAULT_CATALOG: list[tuple[CategoryCreate, list[dict]]] = [
    (
        CategoryCreate(name="API Integrations", description="Webhooks for various API services", color="#6E42CE"),
        [
            {
                "name": "GitHub Event",
                "description": "Send data to GitHub webhook endpoint",
                "url": "https://api.github.com/webhooks/example",
                "headers": [
                    WebhookHeader(key="Content-Type", value="application/json"),
                    WebhookHeader(key="Authorization", value="Bearer YOUR_TOKEN"),
                ],
                "default_payload": _pretty(_GITHUB_PUSH),
                "example_payloads": [
                    ExamplePayload(name="Push Event", payload=_pretty(_GITHUB_PUSH)),
                    ExamplePayload(name="Issue Created", payload=_pretty(_GITHUB_ISSUE)),
                ],
            }
        ],
    ),
    (
        CategoryCreate(name="Notification Services", description="Webhooks for sending notifications", color="#3B82F6"),
        [
            {
                "name": "Slack Notification",
                "description": "Send notification to Slack channel",
                "url": "https://hooks.slack.com/services/YOUR/WEBHOOK/URL",
                "headers": [WebhookHeader(key="Content-Type", value="application/json")],
                "default_payload": _pretty(_SLACK_SIMPLE),
                "example_payloads": [
                    ExamplePayload(name="Simple Message", payload=_pretty(_SLACK_SIMPLE)),
                    ExamplePayload(name="Rich Message", payload=_pretty(_SLACK_RICH)),
                ],
            }
        ],
    ),
    (
        CategoryCreate(name="CRM Tools", description="Customer relationship management integrations", color="#10B981"),
        [
            {
                "name": "HubSpot Contact",
                "description": "Create or update contact in HubSpot",
                "url": "https://api.hubspot.com/crm/v3/objects/contacts",
                "headers": [
                    WebhookHeader(key="Content-Type", value="application/json"),
                    WebhookHeader(key="Authorization", value="Bearer YOUR_HUBSPOT_TOKEN"),
                ],
                "default_payload": _pretty(_HUBSPOT_BASIC),
                "example_payloads": [
                    ExamplePayload(name="Create Basic Contact", payload=_pretty(_HUBSPOT_BASIC)),
                    ExamplePayload(name="Create Contact with Details", payload=_pretty(_HUBSPOT_DETAILED)),
                ],
            }
        ],
    ),
]


def seed_defaults(session: Session) -> tuple[int, int]:
    """Insert the demo catalog when no categories and no webhooks exist yet.

    Returns:
        Tuple of (categories created, webhooks created)
    """
    categories = CategoryRepository(session)
    webhooks = WebhookRepository(session)

    if categories.count() or webhooks.count():
        logger.info("Database already contains data, skipping demo seed")
        return 0, 0

    created_categories = 0
    created_webhooks = 0
    for category_data, webhook_entries in DEFAULT_CATALOG:
        category = categories.create(category_data)
        created_categories += 1
        for entry in webhook_entries:
            webhooks.create(WebhookCreate(category_id=category.id, method="POST", **entry))
            created_webhooks += 1

    logger.info(f"Seeded {created_categories} categories and {created_webhooks} webhooks")
    return created_categories, created_webhooks
