from __future__ import annotations

# GH / API reads and writes
GH_TIMEOUT_SECONDS = 60.0

# Listing every closed PR pages through the whole repository history
GH_PAGINATE_TIMEOUT_SECONDS = 10 * 60.0
