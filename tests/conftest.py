import pytest
import sys
import wave
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Hypothesis configuration for property-based testing
from hypothesis import settings
from mutagen.id3 import TALB, TCON, TIT2, TPE1, TRCK
from mutagen.wave import WAVE

# Register Hypothesis profiles
settings.register_profile("fast", max_examples=50, deadline=None)
settings.register_profile("thorough", max_examples=1000, deadline=None)
settings.load_profile("fast")  # Default to fast profile

ID3_FRAMES = {
    'title': TIT2,
    'artist': TPE1,
    'album': TALB,
    'genre': TCON,
    'track': TRCK,
}


def pytest_collection_modifyitems(items):
    """Automatically order tests: unit tests first, then property tests, then E2E tests.

    Individual tests marked with @pytest.mark.order("last") will run at the very end.
    """
    for item in items:
        # Skip if item already has explicit order marker
        if hasattr(item, 'get_closest_marker') and item.get_closest_marker('order'):
            continue

        # Assign order based on test file name
        test_file = str(item.fspath)
        if 'test_unit_' in test_file:
            item.add_marker(pytest.mark.order(1))
        elif 'test_props_' in test_file:
            item.add_marker(pytest.mark.order(2))
        elif 'test_e2e_' in test_file:
            item.add_marker(pytest.mark.order(3))


def write_wav(path: Path, seconds: float = 1.0, framerate: int = 8000, **tags) -> Path:
    """Write a silent mono WAV file, optionally with ID3 tags.

    Args:
        path: Destination file (any extension)
        seconds: Audio length
        framerate: Sample rate in Hz
        **tags: title/artist/album/genre/track values; omitted tags are not written

    Returns:
        The path written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), 'wb') as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(framerate)
        w.writeframes(b'\x00\x00' * int(seconds * framerate))

    if tags:
        audio = WAVE(str(path))
        audio.add_tags()
        for key, value in tags.items():
            audio.tags.add(ID3_FRAMES[key](encoding=3, text=[str(value)]))
        audio.save()

    return path


def write_settings(path: Path, roots, valid, verbose: bool = False) -> Path:
    """Write a settings TOML file for the given roots and valid extensions."""
    roots_toml = ", ".join(f"'{root}'" for root in roots)
    valid_toml = ", ".join(f'"{ext}"' for ext in valid)
    path.write_text(
        f"[general]\nverbose = {'true' if verbose else 'false'}\n\n"
        f"[directories]\nscan = [{roots_toml}]\n\n"
        f"[types]\nvalid = [{valid_toml}]\n"
    )
    return path


@pytest.fixture
def make_wav():
    """Factory fixture writing WAV files; see write_wav."""
    return write_wav


@pytest.fixture
def settings_file(tmp_path):
    """Factory fixture writing a settings file into tmp_path."""

    def _write(roots, valid, verbose=False, name='config.toml'):
        return write_settings(tmp_path / name, roots, valid, verbose)

    return _write


@pytest.fixture
def library(tmp_path):
    """Small library: a tagged a.wav, b.txt and an empty sub/ directory."""
    root = tmp_path / 'music'
    root.mkdir()
    write_wav(root / 'a.wav', title='Song A', artist='Artist', album='Album', genre='Rock', track='3/12')
    (root / 'b.txt').write_text('notes')
    (root / 'sub').mkdir()
    return root


@pytest.fixture
def reset_loguru():
    """Restore loguru's default stderr handler after tests that reconfigure it."""
    from loguru import logger

    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def loguru_messages():
    """Capture loguru output as a list of formatted messages."""
    from loguru import logger

    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG", format="{message}")
    yield messages
    logger.remove(handler_id)
