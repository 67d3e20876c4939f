"""Prometheus metrics for logins, state writes and committee workflows"""

from prometheus_client import Counter, Histogram

# Authentication
login_counter = Counter(
    "committee_login_total",
    "Login attempts",
    ["outcome"],  # success | rejected
)

# Persistence
state_write_counter = Counter(
    "committee_state_writes_total",
    "Whole-document state writes",
    ["backend", "source"],  # source: full_sync | module | reset
)

storage_failures_counter = Counter(
    "committee_state_storage_failures_total",
    "Failed state reads or writes",
    ["operation"],  # read | write | login
)

# Workflows
attendance_counter = Counter(
    "committee_attendance_registrations_total",
    "Attendance registrations by result",
    ["result"],  # registered | closed | unknown_member | duplicate
)

assembly_transition_counter = Counter(
    "committee_assembly_transitions_total",
    "Assembly status transitions",
    ["status"],
)

document_transition_counter = Counter(
    "committee_document_transitions_total",
    "Document lifecycle actions",
    ["action"],  # create | edit | sign | send | archive | delete
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_login(success: bool) -> None:
    login_counter.labels(outcome="success" if success else "rejected").inc()


def record_state_write(backend: str, source: str) -> None:
    state_write_counter.labels(backend=backend, source=source).inc()


def record_storage_failure(operation: str) -> None:
    storage_failures_counter.labels(operation=operation).inc()
