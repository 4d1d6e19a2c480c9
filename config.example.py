# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/cotask/config.py for parsing and defaults.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "COTASK_APP_NAME": "App display name, also the scheduler name and HTTP User-Agent (default: cotask).",
    "COTASK_LOG_LEVEL": "Console logging level (default: INFO).",
    "COTASK_LOG_DIR": "Directory for cotask.log with full debug logs (default: no file log).",
    # Scheduler
    "COTASK_TURN_LIMIT": "Abort a scheduler run after this many turns (default: 0 = unbounded).",
    # HTTP collaborator
    "COTASK_HTTP_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "COTASK_HTTP_READ_TIMEOUT_SECONDS": "Read timeout (default: 10).",
    "COTASK_HTTP_WORKERS": "Worker threads running HTTP requests (default: 4).",
    "COTASK_HTTP_FOLLOW_REDIRECTS": "Follow redirects (true/false, default: true).",
    # Demos
    "COTASK_DEMO_URL": "URL fetched by the HTTP demo (default: https://api.github.com/repos/rust-lang/rust).",
}
