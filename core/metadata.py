from core.exceptions import CodecError, NoTagsFound
from dataclasses import dataclass
from loguru import logger
from mutagen import File
from mutagen.asf import ASFTags
from mutagen.id3 import ID3
from mutagen.mp4 import MP4Tags

ID3_KEY_MAP = {
    "title": "TIT2",
    "artist": "TPE1",
    "album": "TALB",
    "genre": "TCON",
    "track_number": "TRCK",
}

MP4_KEY_MAP = {
    "title": "\xa9nam",
    "artist": "\xa9ART",
    "album": "\xa9alb",
    "genre": "\xa9gen",
    "track_number": "trkn",
}

ASF_KEY_MAP = {
    "title": "Title",
    "artist": "Author",
    "album": "WM/AlbumTitle",
    "genre": "WM/Genre",
    "track_number": "WM/TrackNumber",
}

# VorbisComment (FLAC, Ogg) and APEv2 use plain names
VORBIS_KEY_MAP = {
    "title": "title",
    "artist": "artist",
    "album": "album",
    "genre": "genre",
    "track_number": "tracknumber",
}


@dataclass(frozen=True)
class TrackInfo:
    title: str
    artist: str
    album: str
    genre: str
    track: int
    duration: float  # seconds

    def describe(self) -> str:
        return f"{self.artist!r} {self.title!r} {self.album!r} {self.genre!r} {self.track} {self.duration:.3f}s"


def _key_map(tags) -> dict[str, str]:
    if isinstance(tags, ID3):
        return ID3_KEY_MAP
    if isinstance(tags, MP4Tags):
        return MP4_KEY_MAP
    if isinstance(tags, ASFTags):
        return ASF_KEY_MAP
    return VORBIS_KEY_MAP


def _first_value(tags, key):
    """Return the first raw value stored under key, or None."""
    if key not in tags:
        return None
    value = tags[key]

    # ID3 frames; TCON resolves numeric genres like "(17)"
    if hasattr(value, 'genres'):
        return value.genres[0] if value.genres else None
    if hasattr(value, 'text'):
        return value.text[0] if value.text else None

    if isinstance(value, list):
        return value[0] if value else None
    return value


def get_tag_value(tags, key: str) -> str:
    """Get a tag as text, or an empty string when it is missing."""
    value = _first_value(tags, _key_map(tags)[key])
    if value is None:
        return ""
    # ASF attributes wrap their payload
    if hasattr(value, 'value'):
        value = value.value
    return str(value)


def parse_track_number(value) -> int | None:
    """Leading track number from "3", "3/12", (3, 12) or an ASF attribute.

    Negative numbers are treated as unparseable.
    """
    if value is None:
        return None
    if hasattr(value, 'value'):
        value = value.value
    if isinstance(value, tuple):
        value = value[0] if value else None
        if not value:
            return None
    if isinstance(value, int):
        number = value
    else:
        try:
            number = int(str(value).split('/')[0].strip())
        except ValueError:
            return None
    return number if number >= 0 else None


def get_track_number(tags) -> int | None:
    return parse_track_number(_first_value(tags, _key_map(tags)["track_number"]))


def read_metadata(file_path) -> TrackInfo:
    """Read tags and audio properties of a single file.

    Args:
        file_path: Path to the audio file

    Returns:
        TrackInfo with missing text fields as "" and a missing track as 0

    Raises:
        CodecError: If the file can't be opened or its format isn't recognized
        NoTagsFound: If the file carries no tag container
    """
    try:
        with open(file_path, 'rb') as f:
            audio = File(f)
    except Exception as e:
        raise CodecError(file_path, f"{type(e).__name__}: {e}") from e

    if audio is None:
        raise CodecError(file_path, "Unsupported file format")

    tags = audio.tags
    if tags is None:
        logger.warning(f"No tags found in {file_path}")
        raise NoTagsFound(file_path)

    track = get_track_number(tags)
    if track is None:
        logger.warning(f"Bad track info in {file_path}")
        track = 0

    try:
        duration = float(audio.info.length or 0.0)
    except (AttributeError, TypeError):
        duration = 0.0

    return TrackInfo(
        title=get_tag_value(tags, "title"),
        artist=get_tag_value(tags, "artist"),
        album=get_tag_value(tags, "album"),
        genre=get_tag_value(tags, "genre"),
        track=track,
        duration=duration,
    )
