from landmarkbench.utils.paths import (
    get_directory,
    get_file_name,
    get_image_files,
    path_combine,
    resolve_path,
    unique_file_name,
)


def test_resolve_path_walks_up(tmp_path):
    target = tmp_path / "libdata" / "test" / "data"
    target.mkdir(parents=True)
    start = tmp_path / "build" / "deep"
    start.mkdir(parents=True)

    assert resolve_path("libdata/test/data", start=start) == str(target.resolve())


def test_resolve_path_from_cwd(tmp_path, monkeypatch):
    (tmp_path / "share").mkdir()
    monkeypatch.chdir(tmp_path)
    assert resolve_path("share") == str((tmp_path / "share").resolve())


def test_resolve_path_not_found(tmp_path):
    assert resolve_path("definitely/not/here-7f3a", start=tmp_path) is None


def test_get_image_files(tmp_path):
    for name in ["a.jpg", "b.JPG", "c.bmp", "d.png", "notes.txt"]:
        (tmp_path / name).write_bytes(b"")
    (tmp_path / "sub.jpg").mkdir()

    names = [p.rsplit("/", 1)[-1] for p in get_image_files(str(tmp_path))]
    assert names == ["a.jpg", "b.JPG", "c.bmp"]


def test_get_image_files_missing_dir(tmp_path):
    assert get_image_files(str(tmp_path / "missing")) == []


def test_file_name_and_directory():
    assert get_file_name("/data/corpus/face01.jpg") == "face01.jpg"
    assert get_file_name("C:\\corpus\\face01.jpg") == "face01.jpg"
    assert get_file_name("face01.jpg") == "face01.jpg"
    assert get_directory("/data/corpus/face01.jpg") == "/data/corpus"
    assert path_combine("/data", "face01.jpg") == "/data/face01.jpg"


def test_unique_file_name_differs_per_directory():
    first = unique_file_name("/corpus/a/face.jpg")
    second = unique_file_name("/corpus/b/face.jpg")

    assert first != second
    assert first.startswith("face.") and first.endswith(".jpg")
    assert unique_file_name("/corpus/a/face.jpg") == first
