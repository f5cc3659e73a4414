import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from loguru import logger
from pathlib import Path

NO_EXTENSION = 'none'


@dataclass(frozen=True)
class WalkEntry:
    path: Path
    name: str
    is_dir: bool


def normalize_path(path_str):
    if isinstance(path_str, Path):
        return path_str

    path_str = path_str.strip().strip('{}').strip('"').strip("'")

    return Path(os.path.expandvars(path_str)).expanduser()


def get_extension(file_name: str) -> str:
    """Return the lowercase extension key for a file name.

    Only the segment after the last dot counts, so ``archive.tar.gz`` is ``gz``.
    A name without any dot maps to ``NO_EXTENSION``; a dotfile such as
    ``.gitignore`` has an empty extension.
    """
    stem, sep, ext = file_name.rpartition('.')
    if not sep:
        return NO_EXTENSION
    if not stem:
        return ''
    return ext.lower()


def is_valid_extension(ext: str, valid_extensions) -> bool:
    return ext in valid_extensions


def normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    """Lowercase extensions and drop a leading dot, e.g. ``.MP3`` -> ``mp3``."""
    normalized = set()
    for ext in extensions:
        ext = ext.strip().lower()
        if ext.startswith('.'):
            ext = ext[1:]
        if ext:
            normalized.add(ext)
    return frozenset(normalized)


def _skip(path, error) -> None:
    logger.debug(f"Traversal skipped {path}: {error}")


def _display_name(name: str) -> str:
    """Decode a file name lossily; undecodable bytes become U+FFFD."""
    return os.fsencode(name).decode('utf-8', 'replace')


def _classify(path: Path) -> bool | None:
    """Return True for a directory, False for a file, None if unreadable.

    Symlinks are resolved, so a dangling link is unreadable.
    """
    try:
        if path.is_dir():
            return True
        if path.is_file():
            return False
    except OSError as e:
        _skip(path, e)
        return None
    _skip(path, "not a regular file or directory")
    return None


def _directory_key(path: Path) -> tuple[int, int] | None:
    try:
        st = os.stat(path)
    except OSError as e:
        _skip(path, e)
        return None
    return st.st_dev, st.st_ino


def _walk_directory(directory: Path, ancestors: frozenset) -> Iterator[WalkEntry]:
    try:
        items = sorted(os.listdir(directory))
    except OSError as e:
        _skip(directory, e)
        return

    for name in items:
        path = directory / name
        is_dir = _classify(path)
        if is_dir is None:
            continue

        key = None
        if is_dir:
            key = _directory_key(path)
            if key is None:
                continue
            # A link back to a directory on the current branch
            if key in ancestors:
                _skip(path, "filesystem loop")
                continue

        yield WalkEntry(path=path, name=_display_name(name), is_dir=is_dir)

        if is_dir:
            yield from _walk_directory(path, ancestors | {key})


def walk_tree(root) -> Iterator[WalkEntry]:
    """Walk everything below root, depth first, sorted by name at each level.

    Symbolic links are followed, except links back to a directory already
    being walked. Directories are yielded before their contents. The root
    itself is not yielded unless it is a regular file. Entries that can't be
    read are skipped and never yielded.

    WalkEntry.name is always printable text; names that aren't valid UTF-8
    are decoded with replacement characters. WalkEntry.path keeps the
    original name for file access.

    Args:
        root: Directory (or single file) to walk

    Yields:
        WalkEntry for each reachable file and directory
    """
    base_path = normalize_path(root)

    is_dir = _classify(base_path)
    if is_dir is None:
        return
    if not is_dir:
        yield WalkEntry(path=base_path, name=_display_name(base_path.name), is_dir=False)
        return

    key = _directory_key(base_path)
    if key is None:
        return

    yield from _walk_directory(base_path, frozenset({key}))
