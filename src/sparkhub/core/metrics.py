"""Prometheus counters for the supervision workflow.

Exposed on /metrics together with the HTTP metrics collected by the
instrumentator.
"""

from prometheus_client import Counter

WORKFLOW_TRANSITIONS = Counter(
    "sparkhub_workflow_transitions_total",
    "Committed supervision workflow transitions",
    ["event"],
)

CONSISTENCY_ERRORS = Counter(
    "sparkhub_consistency_errors_total",
    "Two-record transitions found partially applied after commit",
)

NOTIFICATION_FAILURES = Counter(
    "sparkhub_notification_failures_total",
    "Best-effort notifications that could not be delivered",
    ["event"],
)
