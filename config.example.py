# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKDEPS_APP_NAME": "App display name (default: taskdeps).",
    "TASKDEPS_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths
    "TASKDEPS_DATA_DIR": "Local data dir (default: .local/taskdeps).",
    "TASKDEPS_TASKS_DB_PATH": "SQLite task/edge store (default: <data_dir>/tasks.sqlite3).",
    "TASKDEPS_LOG_DIR": "Directory for taskdeps.log (default: <data_dir>).",
    # Store / engine
    "TASKDEPS_STORE_TIMEOUT_SECONDS": "SQLite busy timeout (default: 30).",
    "TASKDEPS_QUERY_TIMEOUT_SECONDS": "Default timeout of async engine calls; empty/none/0 disables (default: 10).",
    "TASKDEPS_VERIFY_AFTER_WRITE": "Re-check acyclicity after inserting an edge, roll back on conflict (default: true).",
    # Layout
    "TASKDEPS_LAYOUT_VIEWPORT_WIDTH": "Viewport width used to centre graph levels (default: 0).",
    "TASKDEPS_LAYOUT_COMPACT": "Use compact node boxes (default: false).",
}
