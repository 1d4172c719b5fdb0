"""Store capability describing the automation bridge's ambient globals."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Store:
    """Names of the bridge collections that generated scripts read from.

    Compilers and helper renderers never hard-code a global; they ask the
    store. Tests can pass a substitute store and check the rendered text.
    """

    tasks: str = "flattenedTasks"
    projects: str = "flattenedProjects"
    tags: str = "flattenedTags"
    folders: str = "flattenedFolders"
    top_level_folders: str = "folders"
    inbox: str = "inbox"
    document: str = "document"


OMNIFOCUS_STORE = Store()
