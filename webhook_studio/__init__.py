"""Webhook Studio: define, trigger and inspect HTTP webhooks."""
