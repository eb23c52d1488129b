import os
import logging
from pathlib import Path
from typing import Iterator, Optional, Set

from .. import config


class DiskScanner:
    def __init__(self, extensions: Optional[Set[str]] = None):
        self.extensions = extensions if extensions is not None else config.MEDIA_EXTS

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Yields every media file under root, directory by directory."""
        for path in self._iter_files(root):
            if path.name.startswith("._"):
                continue
            if path.suffix.lower() in self.extensions:
                yield path

    def first_file(self, root: Path) -> Optional[Path]:
        return next(self.iter_files(root), None)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        """Depth-first walker using os.scandir for speed."""
        stack = [root]
        while stack:
            current = stack.pop()

            try:
                with os.scandir(current) as it:
                    entries = list(it)
            except OSError:
                logging.warning(f"Permission denied: {current}")
                continue

            # Sort for stable traversal order
            entries.sort(key=lambda e: e.name.lower())

            dirs = []
            files = []
            for e in entries:
                if e.is_dir(follow_symlinks=False):
                    dirs.append(Path(e.path))
                elif e.is_file(follow_symlinks=False):
                    files.append(Path(e.path))

            # Files of a directory come out together, so the folder cache stays warm
            yield from files

            # Push dirs to stack (reversed so we process A before Z)
            for d in reversed(dirs):
                stack.append(d)
