"""Directory watching for unattended conversion."""

from .watcher import DirectoryWatcher, FileState

__all__ = ["DirectoryWatcher", "FileState"]
