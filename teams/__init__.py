"""
Teams module - tenants and their integration settings.

This module handles:
- Team (tenant) records and cleanup settings
- Webhook configurations
- Webhook delivery records
"""
