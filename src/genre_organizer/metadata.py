from __future__ import annotations

import math
from pathlib import Path
from typing import Callable, Union

from mutagen import File

from .errors import MetadataError
from .models import TrackMetadata


AUDIO_EXTENSIONS = {
    ".mp3",
    ".aiff",
    ".aif",
    ".flac",
    ".wav",
    ".m4a",
    ".ogg",
    ".opus",
}

Decoder = Callable[[Path], dict]


def is_audio_file(path: Path) -> bool:
    # macOS AppleDouble sidecar files (._*) are metadata blobs, not audio.
    if path.name.startswith("._"):
        return False
    return path.suffix.lower() in AUDIO_EXTENSIONS and path.is_file()


def _values(value: object) -> list[str]:
    if value is None:
        return []
    # ID3 TCON frames resolve numeric references like "(17)" through .genres
    genres = getattr(value, "genres", None)
    if genres is not None:
        return [str(v).strip() for v in genres]
    text = getattr(value, "text", None)
    if text is not None:
        value = text
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value]
    value = str(value).strip()
    return [value] if value else []


def _tag_values(tags: object, *keys: str) -> list[str]:
    if tags is None:
        return []

    for key in keys:
        try:
            value = tags.get(key)
        except Exception:
            value = None
        found = _values(value)
        if found:
            return found

    return []


def _first(values: list[str]) -> str | None:
    return values[0] if values else None


def decode_tags(path: Path) -> dict:
    """Decode tags with mutagen.

    Returns a dict with ``title``, ``artist``, ``album`` (optional strings),
    ``genre`` (list of strings) and ``duration_seconds`` (float or None).
    Raises ``MutagenError`` or ``OSError`` when the file cannot be decoded, and
    ``MetadataError`` when mutagen does not recognize the format at all.
    """
    audio = File(path, easy=True)
    if audio is None:
        raise MetadataError(path, "unrecognized audio format")

    tags = getattr(audio, "tags", None)
    info = getattr(audio, "info", None)
    length = getattr(info, "length", None)

    return {
        "title": _first(_tag_values(tags, "title", "TITLE", "TIT2", "©nam")),
        "artist": _first(_tag_values(tags, "artist", "albumartist", "ARTIST", "TPE1", "©ART")),
        "album": _first(_tag_values(tags, "album", "ALBUM", "TALB", "©alb")),
        "genre": _tag_values(tags, "genre", "GENRE", "TCON", "©gen"),
        "duration_seconds": float(length) if isinstance(length, (int, float)) else None,
    }


def _duration(value: object) -> int | None:
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return None
    return max(0, int(round(value)))


def read_metadata(path: Path, decoder: Decoder = decode_tags) -> Union[TrackMetadata, MetadataError]:
    """Read tags for one file.

    Decode failures are returned as a ``MetadataError`` instead of raised, so
    the caller always receives a typed result. A file that decodes but has no
    genre tag yields ``TrackMetadata`` whose ``genre`` is ``Unknown``.
    """
    path = Path(path)
    try:
        raw = decoder(path)
    except MetadataError as exc:
        return exc
    except Exception as exc:
        return MetadataError(path, exc)

    genres = raw.get("genre") or []
    if isinstance(genres, str):
        genres = [genres]

    return TrackMetadata(
        path=path,
        title=raw.get("title") or None,
        artist=raw.get("artist") or None,
        album=raw.get("album") or None,
        genres=[str(g) for g in genres],
        duration_seconds=_duration(raw.get("duration_seconds")),
    )
