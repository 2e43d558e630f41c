import os
import threading
from pathlib import Path

import pytest

from landmarkbench.domain.exceptions import LandmarkFormatError
from landmarkbench.domain.models import LandmarkRecord, Point
from landmarkbench.infrastructure.landmark_cache import LandmarkCache


@pytest.fixture
def cache(tmp_path: Path) -> LandmarkCache:
    return LandmarkCache(str(tmp_path / "cache"))


def test_load_missing_entry_returns_none(cache):
    assert cache.load("/corpus/face01.jpg") is None
    assert not cache.contains("/corpus/face01.jpg")


def test_store_then_load_round_trip(cache, detected_record):
    cache.store("/corpus/face01.jpg", detected_record)

    assert cache.contains("/corpus/face01.jpg")
    assert cache.load("/corpus/face01.jpg") == detected_record


def test_round_trip_with_empty_record(cache):
    cache.store("/corpus/face02.jpg", LandmarkRecord())
    assert cache.load("/corpus/face02.jpg") == LandmarkRecord()


def test_cache_file_location(cache, tmp_path):
    path = cache.path_for("/corpus/face01.jpg")
    assert Path(path).parent == tmp_path / "cache"
    assert Path(path).name.startswith("face01.jpg.")
    assert path.endswith(".json")


def test_same_file_name_in_different_directories_does_not_collide(cache):
    first = LandmarkRecord(chin_point=Point(1, 1), success=True)
    second = LandmarkRecord(chin_point=Point(2, 2), success=True)

    cache.store("/corpus/a/face01.jpg", first)
    cache.store("/corpus/b/face01.jpg", second)

    assert cache.path_for("/corpus/a/face01.jpg") != cache.path_for("/corpus/b/face01.jpg")
    assert cache.load("/corpus/a/face01.jpg") == first
    assert cache.load("/corpus/b/face01.jpg") == second


def test_store_overwrites(cache, detected_record):
    cache.store("/corpus/face01.jpg", LandmarkRecord())
    cache.store("/corpus/face01.jpg", detected_record)
    assert cache.load("/corpus/face01.jpg") == detected_record


def test_malformed_entry_raises(cache):
    path = cache.path_for("/corpus/face01.jpg")
    os.makedirs(os.path.dirname(path))
    with open(path, "w", encoding="utf-8") as f:
        f.write('{"crown_point": ')

    with pytest.raises(LandmarkFormatError):
        cache.load("/corpus/face01.jpg")


def test_invalidate(cache, detected_record):
    cache.store("/corpus/face01.jpg", detected_record)

    assert cache.invalidate("/corpus/face01.jpg") is True
    assert cache.load("/corpus/face01.jpg") is None
    assert cache.invalidate("/corpus/face01.jpg") is False


def test_concurrent_stores_on_same_key_leave_a_valid_entry(cache, detected_record):
    records = [detected_record, LandmarkRecord(), LandmarkRecord(chin_point=Point(3, 3), success=True)]
    errors = []

    def worker(record):
        try:
            for _ in range(20):
                cache.store("/corpus/face01.jpg", record)
                assert cache.load("/corpus/face01.jpg") in records
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(r,)) for r in records]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert cache.load("/corpus/face01.jpg") in records


def test_lock_table_does_not_grow(cache, detected_record):
    for i in range(5):
        cache.store(f"/corpus/face{i}.jpg", detected_record)
        cache.load(f"/corpus/face{i}.jpg")
    cache.invalidate("/corpus/face0.jpg")

    assert cache._locks == {}
