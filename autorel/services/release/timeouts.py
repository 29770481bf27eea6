from __future__ import annotations

# Read-only queries only. Packing, version bumps, publishing and pushing run
# unbounded: killing an upload midway can leave the registry ahead of git.

# npm show
REGISTRY_TIMEOUT_SECONDS = 60.0

# jq field extraction
MANIFEST_QUERY_TIMEOUT_SECONDS = 10.0
