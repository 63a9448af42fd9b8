import threading

from tour_map.models import Coordinate
from tour_map.services import ImageScanner
from tour_map.state import ImageLocationIndex


def test_refresh_replaces_index_wholesale():
    index = ImageLocationIndex({"old.jpg": Coordinate(1.0, 1.0)})
    scans = iter(
        [
            {"a.jpg": Coordinate(46.0, 7.0), "b.jpg": Coordinate(46.1, 7.1)},
            {"b.jpg": Coordinate(46.1, 7.1)},
        ]
    )
    scanner = ImageScanner(scanner=lambda: next(scans))

    assert scanner.refresh(index) == 2
    assert set(index.snapshot()) == {"a.jpg", "b.jpg"}

    assert scanner.refresh(index) == 1
    assert index.snapshot() == {"b.jpg": Coordinate(46.1, 7.1)}


def test_scan_runs_outside_the_index_lock():
    index = ImageLocationIndex({"keep.jpg": Coordinate(0.5, 0.5)})
    reads_during_scan = []

    def slow_scan():
        # Readers must not block while the directory walk is in progress.
        reader = threading.Thread(target=lambda: reads_during_scan.append(index.snapshot()))
        reader.start()
        reader.join(timeout=1.0)
        return {"new.jpg": Coordinate(1.0, 2.0)}

    ImageScanner(scanner=slow_scan).refresh(index)

    assert reads_during_scan == [{"keep.jpg": Coordinate(0.5, 0.5)}]
    assert index.snapshot() == {"new.jpg": Coordinate(1.0, 2.0)}


def test_refresh_from_directory(tmp_path):
    index = ImageLocationIndex()
    assert ImageScanner(tmp_path / "missing").refresh(index) == 0
    assert len(index) == 0
