import os
from pathlib import Path
from typing import Iterator, List, Optional, Set

from textgrep.core.constants import TEXT_EXTENSIONS
from textgrep.core.models import DirectoryOptions


def should_include_file(file_path: str, file_name: str, options: DirectoryOptions, cwd: Optional[str] = None) -> bool:
    """Hidden, exclude and type rules for one file (size is checked by the walker)."""
    if not options.include_hidden and file_name.startswith("."):
        return False

    rel = os.path.relpath(file_path, cwd or os.getcwd())
    for pattern in options.exclude_patterns:
        if pattern in rel or pattern in file_name:
            return False

    ext = os.path.splitext(file_name)[1].lower()
    if options.file_types:
        return ext in options.file_types
    return ext in TEXT_EXTENSIONS or ext == ""


class DirectoryWalker:
    """
    Lazy depth-first enumerator of candidate files under a root.

    Entries are visited in name order. Excluded directories are pruned
    before descending. Listing and stat failures drop the entry silently:
    the walker never raises. Pending directories live on an explicit stack,
    so tree depth is not bounded by the interpreter's recursion limit.
    """

    def __init__(self, options: DirectoryOptions):
        self.options = options
        self.cwd = os.getcwd()

    def _dir_excluded(self, name: str) -> bool:
        return any(pattern in name for pattern in self.options.exclude_patterns)

    def _list_dir(self, current_dir: Path, visited: Set[str]) -> Iterator[os.DirEntry]:
        if self.options.follow_symlinks:
            # Cycle detection for symlinks (Directories)
            try:
                real_path = str(current_dir.resolve())
            except (OSError, RuntimeError):
                return iter(())
            if real_path in visited:
                return iter(())
            visited.add(real_path)

        try:
            with os.scandir(current_dir) as it:
                return iter(sorted(it, key=lambda e: e.name))
        except OSError:
            return iter(())

    def iter_files(self, root: Path) -> Iterator[str]:
        follow = self.options.follow_symlinks
        visited: Set[str] = set()
        stack: List[Iterator[os.DirEntry]] = [self._list_dir(Path(root), visited)]

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            try:
                is_dir = entry.is_dir(follow_symlinks=follow)
                is_file = not is_dir and entry.is_file(follow_symlinks=follow)
            except OSError:
                continue

            if is_dir:
                if self._dir_excluded(entry.name):
                    continue
                if self.options.recursive:
                    stack.append(self._list_dir(Path(entry.path), visited))

            elif is_file:
                if not should_include_file(entry.path, entry.name, self.options, self.cwd):
                    continue
                try:
                    st = entry.stat(follow_symlinks=follow)
                except OSError:
                    continue
                if st.st_size > self.options.max_file_size_bytes:
                    continue
                if follow:
                    # Cycle detection for symlinks (Files)
                    try:
                        real_f_path = str(Path(entry.path).resolve())
                    except (OSError, RuntimeError):
                        continue
                    if real_f_path in visited:
                        continue
                    visited.add(real_f_path)
                yield entry.path


def walk_directory(dir_path: str, options: DirectoryOptions) -> Iterator[str]:
    return DirectoryWalker(options).iter_files(Path(dir_path))
