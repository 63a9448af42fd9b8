"""Startup wiring: merge, image scan and access codes before serving."""

import json

import pytest

from tour_map import main


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    data_dir = tmp_path / "data"
    fit_dir = tmp_path / "fit"
    images_dir = tmp_path / "images"
    data_dir.mkdir()
    images_dir.mkdir()
    (data_dir / "tracking_20240601_100000.json").write_text(
        json.dumps({"location": {"lat": 45.0, "lng": 7.0}, "updatedAt": "2024-06-01T10:00:00Z"}),
        encoding="utf-8",
    )
    (data_dir / "tracking_20240601_110000.json").write_text(
        json.dumps({"location": {"lat": 45.2, "lng": 7.1}, "updatedAt": "2024-06-01T11:00:00Z"}),
        encoding="utf-8",
    )
    (tmp_path / "codes.txt").write_text("family\nfriends\n", encoding="utf-8")
    (tmp_path / "tracking_token.txt").write_text("share-1\n", encoding="utf-8")

    monkeypatch.setattr(main, "DATA_DIR", str(data_dir))
    monkeypatch.setattr(main, "FIT_DIR", str(fit_dir))
    monkeypatch.setattr(main, "IMAGES_DIR", str(images_dir))
    monkeypatch.setattr(main, "CODES_FILE", str(tmp_path / "codes.txt"))
    monkeypatch.setattr(main, "TRACKING_TOKEN_FILE", str(tmp_path / "tracking_token.txt"))
    return tmp_path


def test_build_state_loads_everything(workspace):
    state, scanner, integrator = main.build_state()

    assert [wp.location.as_pair() for wp in state.track.snapshot()] == [[45.0, 7.0], [45.2, 7.1]]
    assert state.track.watermark.hour == 11
    assert "family" in state.codes and "friends" in state.codes
    assert len(state.images) == 0
    assert not integrator.suspended


def test_build_supervisor_registers_background_tasks(workspace):
    state, scanner, integrator = main.build_state()
    supervisor = main.build_supervisor(state, scanner, integrator)
    assert sorted(task.name for task in supervisor.tasks) == ["image-scan", "live-feed"]
    assert not supervisor.stopped


def test_ensure_directories_creates_data_and_fit(workspace):
    main._ensure_directories()
    assert (workspace / "fit").is_dir()
    assert (workspace / "data").is_dir()
