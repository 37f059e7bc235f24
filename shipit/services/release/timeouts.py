from __future__ import annotations

# gh calls (auth status, workflow run, run list)
GH_TIMEOUT_SECONDS = 60.0

# Idempotent gh read retry policy
GH_READ_RETRY_ATTEMPTS = 3
GH_READ_RETRY_DELAY_SECONDS = 1.0

# Runs fetched per lookup while waiting for a dispatched run to appear
RUN_LIST_LIMIT = 10
