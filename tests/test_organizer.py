from pathlib import Path

import pytest

from genre_organizer.errors import MetadataError, RootScanError
from genre_organizer.organizer import organize_by_genre, process_file


class RecordingProgress:
    def __init__(self):
        self.started_with = None
        self.increments = 0
        self.stopped = False

    def start(self, total):
        self.started_with = total

    def increment(self, step=1):
        self.increments += step

    def update(self, current):
        self.increments = current

    def stop(self):
        self.stopped = True


def create_scenario(root: Path) -> None:
    root.mkdir(parents=True)
    (root / "track1.mp3").write_bytes(b"jazz audio")
    (root / "nested").mkdir()
    (root / "nested" / "track2.flac").write_bytes(b"untagged audio")
    (root / "track3.wav").write_bytes(b"corrupt")


SCENARIO_TAGS = {
    "track1.mp3": {"genre": ["Jazz"]},
    "track2.flac": {"genre": []},
    "track3.wav": ValueError("could not find a valid frame"),
}


def test_three_track_scenario(tmp_path, fake_decoder):
    source = tmp_path / "music"
    dest = tmp_path / "organized-by-genre"
    create_scenario(source)
    progress = RecordingProgress()

    report = organize_by_genre(source, dest, concurrency=5, progress=progress, decoder=fake_decoder(SCENARIO_TAGS))

    assert (dest / "Jazz" / "track1.mp3").read_bytes() == b"jazz audio"
    assert (dest / "Unknown" / "track2.flac").read_bytes() == b"untagged audio"
    assert not any(p.name == "track3.wav" for p in dest.rglob("*"))

    summary = report.summary
    assert (summary.copied, summary.skipped, summary.failed) == (2, 0, 1)
    assert summary.genres == {"Jazz": 1, "Unknown": 1}
    assert summary.bytes_copied == len(b"jazz audio") + len(b"untagged audio")

    [failure] = report.failures
    assert failure.source.name == "track3.wav"
    assert isinstance(failure.error, MetadataError)
    assert "could not find a valid frame" in str(failure.error)

    assert progress.started_with == 3
    assert progress.increments == 3
    assert progress.stopped

    # sources are never touched
    assert (source / "track1.mp3").read_bytes() == b"jazz audio"
    assert (source / "track3.wav").exists()


def test_second_run_skips_everything(tmp_path, fake_decoder):
    source = tmp_path / "music"
    dest = tmp_path / "out"
    source.mkdir()
    tags = {}
    for i in range(12):
        (source / f"song{i}.ogg").write_bytes(f"song {i}".encode())
        tags[f"song{i}.ogg"] = {"genre": ["Rock" if i % 2 else "Folk"]}
    decoder = fake_decoder(tags)

    first = organize_by_genre(source, dest, concurrency=4, decoder=decoder)
    before = {p: p.read_bytes() for p in dest.rglob("*") if p.is_file()}
    second = organize_by_genre(source, dest, concurrency=4, decoder=decoder)
    after = {p: p.read_bytes() for p in dest.rglob("*") if p.is_file()}

    assert first.summary.copied == 12
    assert second.summary.copied == 0
    assert second.summary.skipped == 12
    assert all(r.status == "skipped" for r in second.results)
    assert before == after


def test_preexisting_destination_file_is_kept(tmp_path, fake_decoder):
    source = tmp_path / "music"
    dest = tmp_path / "out"
    source.mkdir()
    (source / "track.mp3").write_bytes(b"incoming")
    (dest / "Jazz").mkdir(parents=True)
    (dest / "Jazz" / "track.mp3").write_bytes(b"already here")

    report = organize_by_genre(source, dest, decoder=fake_decoder({"track.mp3": {"genre": ["Jazz"]}}))

    assert [r.status for r in report.results] == ["skipped"]
    assert (dest / "Jazz" / "track.mp3").read_bytes() == b"already here"


def test_genres_that_sanitize_alike_are_merged(tmp_path, fake_decoder):
    source = tmp_path / "music"
    dest = tmp_path / "out"
    source.mkdir()
    (source / "a.mp3").write_bytes(b"a")
    (source / "b.mp3").write_bytes(b"b")
    decoder = fake_decoder({"a.mp3": {"genre": ["Hip/Hop"]}, "b.mp3": {"genre": ["Hip:Hop "]}})

    report = organize_by_genre(source, dest, decoder=decoder)

    assert report.summary.genres == {"HipHop": 2}
    assert sorted(p.name for p in dest.iterdir()) == ["HipHop"]


@pytest.mark.parametrize("concurrency", [1, 5, 9])
def test_progress_matches_file_count(tmp_path, fake_decoder, concurrency):
    source = tmp_path / "music"
    source.mkdir()
    tags = {}
    for i in range(9):
        (source / f"t{i}.wav").write_bytes(b"x")
        tags[f"t{i}.wav"] = ValueError("bad") if i % 4 == 0 else {"genre": ["Techno"]}
    progress = RecordingProgress()

    report = organize_by_genre(source, tmp_path / "out", concurrency=concurrency, progress=progress, decoder=fake_decoder(tags))

    assert progress.increments == 9
    assert report.summary.total == 9
    assert report.summary.failed == 3


def test_empty_source_is_not_an_error(tmp_path, fake_decoder):
    source = tmp_path / "music"
    (source / "art").mkdir(parents=True)
    (source / "art" / "cover.jpg").write_bytes(b"jpg")
    dest = tmp_path / "out"
    progress = RecordingProgress()

    report = organize_by_genre(source, dest, progress=progress, decoder=fake_decoder({}))

    assert report.results == []
    assert report.summary.total == 0
    assert progress.started_with is None
    assert dest.is_dir()


def test_unscannable_root_is_fatal(tmp_path, fake_decoder):
    with pytest.raises(RootScanError):
        organize_by_genre(tmp_path / "missing", tmp_path / "out", decoder=fake_decoder({}))


def test_metadata_failure_skips_placement(tmp_path, fake_decoder):
    source = tmp_path / "broken.mp3"
    source.write_bytes(b"x")
    dest = tmp_path / "out"
    dest.mkdir()

    result = process_file(source, dest, decoder=fake_decoder({"broken.mp3": OSError("read error")}))

    assert result.status == "failed"
    assert isinstance(result.error, MetadataError)
    assert list(dest.iterdir()) == []


def test_verbose_prints_each_outcome(tmp_path, fake_decoder, capsys):
    source = tmp_path / "music"
    source.mkdir()
    (source / "a.mp3").write_bytes(b"a")
    (source / "b.mp3").write_bytes(b"b")
    decoder = fake_decoder({"a.mp3": {"genre": ["Jazz"]}, "b.mp3": ValueError("nope")})

    organize_by_genre(source, tmp_path / "out", decoder=decoder, verbose=True)

    out = capsys.readouterr().out
    assert "[organize] files found: 2" in out
    assert "[copy]" in out and "a.mp3" in out
    # failures are listed once, in the run summary
    assert "[failed]" not in out


def test_discovered_count_is_reported(tmp_path, fake_decoder, capsys):
    source = tmp_path / "music"
    source.mkdir()
    for i in range(3):
        (source / f"t{i}.mp3").write_bytes(b"x")

    organize_by_genre(source, tmp_path / "out", decoder=fake_decoder({}))

    assert "[organize] files found: 3" in capsys.readouterr().out


def test_blank_first_genre_files_under_unknown(tmp_path, fake_decoder):
    source = tmp_path / "music"
    source.mkdir()
    (source / "a.mp3").write_bytes(b"a")
    dest = tmp_path / "out"

    report = organize_by_genre(source, dest, decoder=fake_decoder({"a.mp3": {"genre": ["", "Rock"]}}))

    assert (dest / "Unknown" / "a.mp3").is_file()
    assert not (dest / "Rock").exists()
    assert report.summary.genres == {"Unknown": 1}
