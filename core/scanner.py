"""Two-pass library scanner.

Estimate pass: walk and classify by extension only, never opening files.
Scan pass: the same walk, additionally reading metadata from valid files.

Both passes run through the same traversal routine.
"""

import time
from collections.abc import Callable, Iterator
from config import ScanSettings
from core.exceptions import ExtractionError
from core.logging import log_error, log_file_operation, log_scan_summary
from core.metadata import TrackInfo, read_metadata
from core.stats import ScanStats
from loguru import logger
from utils.files import get_extension, is_valid_extension, walk_tree


def scan_dirs(
    settings: ScanSettings,
    estimate: bool,
    extractor: Callable[[str], TrackInfo] = read_metadata,
) -> ScanStats:
    """Run one pass over every configured root.

    Args:
        settings: Scan settings (roots, valid extensions, verbosity)
        estimate: When True, count valid files without reading them
        extractor: Reads one file; raises ExtractionError on failure

    Returns:
        ScanStats for this pass only
    """
    stats = ScanStats(estimate=estimate)
    mode = "Estimating" if estimate else "Scanning"
    start = time.perf_counter()

    logger.bind(roots=list(settings.scan_roots)).debug(f"{mode} {len(settings.scan_roots)} root(s)")

    for root in settings.scan_roots:
        for entry in walk_tree(root):
            if entry.is_dir:
                stats.directories += 1
                if settings.verbose:
                    log_file_operation(mode.lower(), entry.path, message=f"{mode} Dir: {entry.path}")
                continue

            ext = get_extension(entry.name)
            stats.record_extension(ext)

            if not is_valid_extension(ext, settings.valid_extensions):
                stats.other_files += 1
                continue

            if estimate:
                stats.valid_files += 1
                continue

            try:
                track = extractor(str(entry.path))
            except ExtractionError as e:
                stats.error_files += 1
                log_error(e, filepath=str(entry.path))
                continue

            stats.valid_files += 1
            if settings.verbose:
                log_file_operation("read", entry.path, message=track.describe())

    log_scan_summary(stats, (time.perf_counter() - start) * 1000)
    return stats


def run_scan(
    settings: ScanSettings,
    extractor: Callable[[str], TrackInfo] = read_metadata,
    skip_estimate: bool = False,
) -> Iterator[ScanStats]:
    """Yield the estimate pass, then the real scan; results are kept apart.

    Each pass starts only after the caller has taken the previous result.
    """
    if not skip_estimate:
        yield scan_dirs(settings, estimate=True, extractor=extractor)
    yield scan_dirs(settings, estimate=False, extractor=extractor)
