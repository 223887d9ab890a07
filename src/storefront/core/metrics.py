from prometheus_client import Counter

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total number of HTTP requests",
    ["method", "path", "status_code"],
)

STORAGE_ERRORS = Counter(
    "storage_errors_total",
    "Total number of failed key-value storage operations",
    ["operation"],
)

HISTORY_APPENDS = Counter(
    "history_appends_total",
    "Total number of entries appended to a history journal",
    ["journal"],
)

AUTOSAVE_FLUSHES = Counter(
    "checkout_autosave_flushes_total",
    "Total number of debounced checkout draft flushes",
    ["outcome"],
)
