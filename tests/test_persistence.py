from pathlib import Path

from followup_tracker.persistence.filesystem import FileStorage


def test_file_storage_creates_export_directory(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    path = storage.make_export_path("csv", prefix="backup")

    assert storage.export_root == tmp_path / "exports"
    assert storage.export_root.is_dir()
    assert path.parent == storage.export_root
    assert path.name.startswith("backup_") and path.suffix == ".csv"


def test_file_storage_writes_json_and_bytes(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    json_path = tmp_path / "prefs" / "settings.json"
    blob_path = storage.make_export_path("xlsx")

    storage.write_json(json_path, {"hello": "world"})
    storage.write_bytes(blob_path, b"\x00\x01")

    assert json_path.read_text(encoding="utf-8") == '{\n  "hello": "world"\n}'
    assert storage.read_json(json_path) == {"hello": "world"}
    assert storage.read_bytes(blob_path) == b"\x00\x01"
    assert not json_path.with_suffix(".json.tmp").exists()
