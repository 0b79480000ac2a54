"""
Licenses module - License expiration and lifecycle management.

This module handles:
- License entity and expiration policy
- Expiration evaluation (resolution, classification, validity, retention)
- License lifecycle (create, update, suspend, resume, validate)
- Expired license cleanup
"""
