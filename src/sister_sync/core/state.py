# src/sister_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.task_store import TaskStore
from .ports import MotivationGenerator, TaskParser


@dataclass
class AppState:
    """Everything a connector or command needs; built once in cli/bootstrap.py."""

    settings: Any
    store: TaskStore
    parser: TaskParser
    motivation: MotivationGenerator
    llm_online: bool = False
