"""Per-pass scan statistics and their report."""

from dataclasses import dataclass, field


@dataclass
class ScanStats:
    """Statistics from a single estimate or scan pass."""

    estimate: bool = False
    directories: int = 0  # Directory nodes visited
    other_files: int = 0  # Files without a valid extension
    error_files: int = 0  # Valid files whose metadata couldn't be read
    valid_files: int = 0  # Valid files classified (estimate) or read (scan)
    found_types: dict[str, int] = field(default_factory=dict)

    def record_extension(self, ext: str) -> None:
        self.found_types[ext] = self.found_types.get(ext, 0) + 1

    @property
    def total_files(self) -> int:
        return self.other_files + self.valid_files + self.error_files

    def sorted_types(self) -> list[tuple[str, int]]:
        """Extension counts ordered by extension."""
        return sorted(self.found_types.items())

    def summary(self) -> dict[str, int]:
        return {
            'valid_files': self.valid_files,
            'other_files': self.other_files,
            'error_files': self.error_files,
            'directories': self.directories,
            'total_files': self.total_files,
        }


def format_report(stats: ScanStats) -> list[str]:
    """Render a pass as report lines: one per extension, then the totals.

    Args:
        stats: ScanStats to render (not modified)

    Returns:
        List of lines without trailing newlines
    """
    lines = [f'"{ext}": {count}' for ext, count in stats.sorted_types()]

    if stats.estimate:
        lines.append(f"Valid {stats.valid_files}, Other: {stats.other_files} Dirs: {stats.directories}")
    else:
        lines.append(
            f"Valid {stats.valid_files}, Other: {stats.other_files}, "
            f"Error: {stats.error_files}, Dirs: {stats.directories}"
        )
    return lines
