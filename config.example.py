# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "SISTERSYNC_APP_NAME": "App display name (default: SisterSync).",
    "SISTERSYNC_LOG_LEVEL": "Console logging level (default: INFO).",
    # People
    "SISTERSYNC_PARTICIPANTS": "Comma/space separated names tasks can be assigned to (default: Anna Bella Chloe).",
    # Local storage (gitignored)
    "SISTERSYNC_DATA_DIR": "Local data directory (default: .local/sistersync).",
    "SISTERSYNC_STORAGE_DB_PATH": "SQLite file holding the task slot (default: <data_dir>/storage.sqlite3).",
    "SISTERSYNC_STORAGE_KEY": "Name of the slot holding the task list (default: sisterSyncTasks).",
    "SISTERSYNC_STORAGE_QUOTA_BYTES": "Max bytes stored; 0 disables the limit (default: 5 MiB).",
    # Save timing
    "SISTERSYNC_SAVE_DEBOUNCE_MS": "Quiet time after the last change before saving (default: 500).",
    "SISTERSYNC_SAVED_INDICATOR_MS": "How long 'saving' shows before 'saved' (default: 500).",
    # LLM / OpenRouter (only needed for /magic and the daily quote)
    "SISTERSYNC_OPENROUTER_API_KEY": "OpenRouter API key (plain OPENROUTER_API_KEY also accepted).",
    "SISTERSYNC_OPENROUTER_BASE_URL": "OpenAI-compatible base URL (default: https://openrouter.ai/api/v1).",
    "SISTERSYNC_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "SISTERSYNC_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "SISTERSYNC_APP_TITLE": "Optional OpenRouter metadata header title.",
    "SISTERSYNC_LLM_CONNECT_TIMEOUT_SECONDS": "Connect timeout (default: 5).",
    "SISTERSYNC_LLM_READ_TIMEOUT_SECONDS": "Read timeout (default: 25).",
}
