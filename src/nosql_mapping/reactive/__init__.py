"""Async (Observable-based) access to document templates and repositories."""

from __future__ import annotations

from .observable import Observable
from .template import ReactiveDocumentTemplate, reactive_template

__all__ = [
    "Observable",
    "ReactiveDocumentTemplate",
    "reactive_template",
]
