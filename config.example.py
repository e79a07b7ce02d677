# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Command line flags (--taskfile, --concurrent, --keep-going, --log-level) override them.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKWEAVE_APP_NAME": "App display name (default: taskweave).",
    "TASKWEAVE_LOG_LEVEL": "Console logging level (default: INFO).",
    "TASKWEAVE_LOG_TO_FILE": "Also write a full DEBUG log to <data_dir>/taskweave.log (default: true).",
    # Paths (gitignored)
    "TASKWEAVE_DATA_DIR": "Local data directory (default: .local/taskweave).",
    "TASKWEAVE_TASKFILE": "Python file defining register_tasks(state) (default: taskfile.py).",
    # Runner
    "TASKWEAVE_CONCURRENT": "Run independent sibling tasks concurrently (true/false, default: false).",
    "TASKWEAVE_KEEP_GOING": "After a failure keep starting tasks unrelated to it (true/false, default: false).",
}
