import tomllib
from core.exceptions import ConfigurationError
from dataclasses import dataclass
from decouple import config
from pathlib import Path
from utils.files import normalize_extensions, normalize_path

# Settings file location
SCAN_CONFIG_FILE = config('TAGSCAN_CONFIG', default='config.toml')

# Logging Configuration
LOG_LEVEL = config('TAGSCAN_LOG_LEVEL', default='INFO')
LOG_FILE = config('TAGSCAN_LOG_FILE', default=None)


@dataclass(frozen=True)
class ScanSettings:
    """Read-only settings handed to every scan pass."""

    verbose: bool
    valid_extensions: frozenset[str]
    scan_roots: tuple[str, ...]


def _require_section(data: dict, name: str, path: Path, required: bool = True) -> dict:
    section = data.get(name)
    if section is None:
        if required:
            raise ConfigurationError(f"Missing [{name}] section in {path}")
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"[{name}] in {path} must be a table")
    return section


def _require_string_list(section: dict, section_name: str, key: str, path: Path) -> list[str]:
    if key not in section:
        raise ConfigurationError(f"Missing '{key}' in [{section_name}] of {path}")
    value = section[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"'{section_name}.{key}' in {path} must be a list of strings")
    return value


def parse_settings(data: dict, path: Path, verbose_override: bool | None = None) -> ScanSettings:
    """Build ScanSettings from an already-decoded TOML document.

    Args:
        data: Decoded TOML mapping
        path: Source path, used in error messages only
        verbose_override: When not None, replaces [general] verbose

    Returns:
        ScanSettings

    Raises:
        ConfigurationError: If a section or key is missing or has the wrong type
    """
    general = _require_section(data, 'general', path, required=False)
    directories = _require_section(data, 'directories', path)
    types = _require_section(data, 'types', path)

    verbose = general.get('verbose', False)
    if not isinstance(verbose, bool):
        raise ConfigurationError(f"'general.verbose' in {path} must be true or false")
    if verbose_override is not None:
        verbose = verbose_override

    scan = _require_string_list(directories, 'directories', 'scan', path)
    valid = _require_string_list(types, 'types', 'valid', path)

    return ScanSettings(
        verbose=verbose,
        valid_extensions=normalize_extensions(valid),
        scan_roots=tuple(str(normalize_path(root)) for root in scan),
    )


def load_settings(path: str | Path | None = None, verbose_override: bool | None = None) -> ScanSettings:
    """Load scan settings from a TOML file.

    Args:
        path: Settings file (default: TAGSCAN_CONFIG or config.toml)
        verbose_override: When not None, replaces [general] verbose. Falls back
            to TAGSCAN_VERBOSE from the environment.

    Returns:
        ScanSettings

    Raises:
        ConfigurationError: If the file can't be read or parsed
    """
    settings_path = Path(path if path is not None else SCAN_CONFIG_FILE)

    # TAGSCAN_VERBOSE replaces [general] verbose only when it is set
    if verbose_override is None and config('TAGSCAN_VERBOSE', default=None) is not None:
        try:
            verbose_override = config('TAGSCAN_VERBOSE', cast=bool)
        except ValueError as e:
            raise ConfigurationError(f"TAGSCAN_VERBOSE must be a boolean: {e}") from e

    try:
        with open(settings_path, 'rb') as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"Error reading {settings_path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Error parsing {settings_path}: {e}") from e

    return parse_settings(data, settings_path, verbose_override)
