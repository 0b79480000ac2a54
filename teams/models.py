"""
Model registration for the teams app.
"""
from teams.infrastructure.models import Team, WebhookConfig, WebhookEvent  # noqa: F401
