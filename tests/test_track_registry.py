import logging

import pytest

from racetrack_game.engine import Position
from racetrack_game.engine.track_registry import TrackRegistry


def _write(directory, name, rows):
    path = directory / f"{name}.txt"
    path.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return path


def test_registry_lists_tracks_by_id_and_reuses_parsed_maps(tmp_path):
    _write(tmp_path, "Short Oval", ["XXXXX", "XTTFX", "XXXXX"])
    _write(tmp_path, "hairpin", ["XXXX", "XTFX", "XXXX"])
    (tmp_path / "notes.md").write_text("not a track", encoding="utf-8")

    registry = TrackRegistry(tmp_path)

    descriptors = registry.list_tracks()
    assert [d.track_id for d in descriptors] == ["hairpin", "short_oval"]
    assert (descriptors[1].height, descriptors[1].width, descriptors[1].finish_cells) == (3, 5, 1)
    assert descriptors[1].summary() == "short_oval: 3x5, 1 finish cells (Short Oval.txt)"

    track = registry.load("Short Oval")
    assert track.track_id == "short_oval"
    assert track.finish_cells() == [Position(1, 3)]
    assert registry.load("short_oval") is track


def test_registry_skips_malformed_maps_when_scanning(tmp_path, caplog):
    _write(tmp_path, "good", ["XXXX", "XTFX", "XXXX"])
    _write(tmp_path, "ragged", ["XXXX", "XTF", "XXXX"])
    _write(tmp_path, "no_finish", ["XXXX", "XTTX", "XXXX"])
    (tmp_path / "empty.txt").write_text("\n\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="racetrack_game.engine.track_registry"):
        registry = TrackRegistry(tmp_path)

    assert [d.track_id for d in registry.list_tracks()] == ["good"]
    assert set(registry.rejected) == {"ragged.txt", "no_finish.txt", "empty.txt"}
    assert registry.rejected["no_finish.txt"] == "no finish cell"
    assert "Skipping malformed track ragged.txt" in caplog.text
    with pytest.raises(KeyError):
        registry.load("ragged")


def test_registry_unknown_track_raises_key_error(tmp_path):
    registry = TrackRegistry(tmp_path)
    with pytest.raises(KeyError):
        registry.load("missing")


def test_registry_missing_directory_is_empty(tmp_path):
    registry = TrackRegistry(tmp_path / "absent")
    assert registry.list_tracks() == []


def test_bundled_tracks_load():
    registry = TrackRegistry()
    ids = [d.track_id for d in registry.list_tracks()]
    assert ids == sorted(ids)
    assert {"track1", "hairpin"} <= set(ids)
    assert registry.rejected == {}
    for track_id in ids:
        track = registry.load(track_id)
        assert track.finish_cells()
        assert track.find_highest_weight_open_cell() is not None
