"""SisterSync: a shared, serverless task list synced by copy/paste codes."""

__version__ = "0.1.0"
