"""
Prometheus metrics for the license service.

Custom metrics for business logic monitoring.
"""

from prometheus_client import Counter

# License metrics
licenses_created_total = Counter(
    "licenses_created_total",
    "Total licenses created",
    ["expiration_type"],
)

licenses_updated_total = Counter(
    "licenses_updated_total",
    "Total license policy updates",
    ["expiration_type"],
)

licenses_suspended_total = Counter(
    "licenses_suspended_total",
    "Total licenses suspended",
)

license_validations_total = Counter(
    "license_validations_total",
    "Total license validations by outcome",
    ["outcome"],
)

licenses_purged_total = Counter(
    "licenses_purged_total",
    "Total expired licenses deleted by cleanup",
)

# Webhook metrics
webhook_deliveries_total = Counter(
    "webhook_deliveries_total",
    "Total webhook delivery attempts by resulting status",
    ["status"],
)
