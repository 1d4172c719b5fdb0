"""Script generation and result marshalling for the OmniFocus automation bridge.

Usage:
    from omnifocus_mcp.core.omnifocus import OmniFocus

    omnifocus = OmniFocus()
    for task in omnifocus.list_tasks(flagged=True):
        print(task.name)
"""

from omnifocus_mcp.core.omnifocus.client import OmniFocus
from omnifocus_mcp.core.omnifocus.executor import ScriptRunner
from omnifocus_mcp.core.omnifocus.literals import SafeLiteral, literal
from omnifocus_mcp.core.omnifocus.models import (
    Folder,
    Perspective,
    Project,
    ProjectStats,
    Tag,
    TagStats,
    Task,
    TaskStats,
)
from omnifocus_mcp.core.omnifocus.nodes import Script
from omnifocus_mcp.core.omnifocus.store import OMNIFOCUS_STORE, Store

__all__ = [
    "OmniFocus",
    "ScriptRunner",
    "Script",
    "Store",
    "OMNIFOCUS_STORE",
    "SafeLiteral",
    "literal",
    "Task",
    "Project",
    "Tag",
    "Folder",
    "Perspective",
    "TaskStats",
    "ProjectStats",
    "TagStats",
]
