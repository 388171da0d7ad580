#!/usr/bin/env python3
"""Manual smoke run against a live server: login, CRUD, execute, history, relay."""
from __future__ import annotations

import json
import os
import sys
from typing import Any

import httpx

# Default base URL - can be overridden via environment variable
BASE_URL = os.getenv("API_URL", "http://localhost:8000")
API_PREFIX = "/api"
TARGET_URL = os.getenv("WEBHOOK_TARGET_URL", "https://httpbin.org/anything")


def print_section(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def print_response(response: httpx.Response, expected_status: int | None = None) -> Any:
    """Print formatted response information and return the decoded body."""
    marker = "OK " if response.status_code < 400 else "ERR"
    print(f"[{marker}] Status: {response.status_code} {response.reason_phrase}")

    if expected_status and response.status_code != expected_status:
        print(f"[!!] Expected status {expected_status}, got {response.status_code}")

    if not response.content:
        return None
    try:
        data = response.json()
    except ValueError:
        print(f"Response text: {response.text[:500]}")
        return None
    print(f"Response: {json.dumps(data, indent=2)[:2000]}")
    return data


def login(client: httpx.Client) -> dict[str, str]:
    print_section("1. Login (POST /api/auth/login)")
    response = client.post(
        f"{API_PREFIX}/auth/login",
        json={
            "email": os.getenv("ADMIN_EMAIL", "admin@example.com"),
            "password": os.getenv("ADMIN_PASSWORD", "admin123"),
        },
    )
    data = print_response(response, expected_status=200)
    if not data:
        raise RuntimeError("Login failed")
    return {"Authorization": f"Bearer {data['token']}"}


def create_webhook(client: httpx.Client, headers: dict[str, str]) -> dict[str, Any] | None:
    print_section("2. Create Category and Webhook")
    category = print_response(
        client.post(f"{API_PREFIX}/categories", json={"name": "Smoke Test"}, headers=headers),
        expected_status=201,
    )
    if not category:
        return None

    return print_response(
        client.post(
            f"{API_PREFIX}/webhooks",
            json={
                "category_id": category["id"],
                "name": "Smoke Test Hook",
                "url": TARGET_URL,
                "method": "POST",
                "headers": [
                    {"key": "X-Smoke", "value": "1", "enabled": True},
                    {"key": "X-Disabled", "value": "never-sent", "enabled": False},
                ],
                "default_payload": json.dumps({"hello": "world"}),
            },
            headers=headers,
        ),
        expected_status=201,
    )


def execute_webhook(client: httpx.Client, headers: dict[str, str], webhook_id: str) -> None:
    print_section("3. Execute Webhook (POST /api/webhooks/{id}/execute)")
    print_response(client.post(f"{API_PREFIX}/webhooks/{webhook_id}/execute", headers=headers), expected_status=200)

    print("Execute with payload override")
    print_response(
        client.post(
            f"{API_PREFIX}/webhooks/{webhook_id}/execute",
            json={"payload": json.dumps({"override": True})},
            headers=headers,
        ),
        expected_status=200,
    )


def show_history(client: httpx.Client, headers: dict[str, str], webhook_id: str) -> None:
    print_section("4. Response History (GET /api/webhooks/{id}/responses)")
    data = print_response(client.get(f"{API_PREFIX}/webhooks/{webhook_id}/responses", headers=headers), 200)
    if data is not None:
        print(f"Found {len(data)} recorded response(s)")


def relay(client: httpx.Client) -> None:
    print_section("5. Relay (POST /api/relay/execute-webhook)")
    print_response(
        client.post(
            f"{API_PREFIX}/relay/execute-webhook",
            json={"url": TARGET_URL, "method": "GET", "headers": {"X-Relay": "1"}},
        ),
        expected_status=200,
    )

    print("Relay with a missing URL (expect 500 with error body)")
    print_response(client.post(f"{API_PREFIX}/relay/execute-webhook", json={"method": "POST"}), expected_status=500)


def cleanup(client: httpx.Client, headers: dict[str, str], webhook: dict[str, Any]) -> None:
    print_section("6. Cleanup")
    print_response(client.delete(f"{API_PREFIX}/webhooks/{webhook['id']}", headers=headers), expected_status=204)
    if webhook.get("category_id"):
        print_response(
            client.delete(f"{API_PREFIX}/categories/{webhook['category_id']}", headers=headers),
            expected_status=204,
        )


def main() -> int:
    print(f"Running smoke checks against {BASE_URL} (target: {TARGET_URL})")

    try:
        with httpx.Client(base_url=BASE_URL, timeout=30.0) as client:
            headers = login(client)
            webhook = create_webhook(client, headers)
            if webhook:
                execute_webhook(client, headers, webhook["id"])
                show_history(client, headers, webhook["id"])
            relay(client)
            if webhook:
                cleanup(client, headers, webhook)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except (httpx.HTTPError, RuntimeError) as e:
        print(f"\n\nSmoke run failed: {e}")
        return 1

    print_section("Summary")
    print("All smoke checks completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
