import os
import time

from app.core.cleanup import cleanup_scratch
from app.core.config import settings


def test_cleanup_scratch_removes_only_stale_files(tmp_path, monkeypatch):
    old_file = tmp_path / "1000.pdf"
    new_file = tmp_path / "2000.pdf"
    old_file.write_bytes(b"old")
    new_file.write_bytes(b"new")
    os.utime(old_file, (0, 0))
    os.utime(new_file, (1000, 1000))
    (tmp_path / "subdir").mkdir()

    monkeypatch.setattr(time, "time", lambda: 1500)
    monkeypatch.setattr(settings, "cleanup_ttl", 600, raising=False)

    removed = cleanup_scratch(tmp_dir=tmp_path)

    assert removed == 1
    assert not old_file.exists()
    assert new_file.exists()
    assert (tmp_path / "subdir").is_dir()


def test_cleanup_scratch_missing_directory(tmp_path):
    assert cleanup_scratch(tmp_dir=tmp_path / "does-not-exist") == 0


def test_cleanup_scratch_defaults_to_settings_dir(temp_store, monkeypatch):
    name = temp_store.store("a.txt", b"a")
    os.utime(temp_store.path_for(name), (0, 0))
    monkeypatch.setattr(settings, "cleanup_ttl", 10, raising=False)

    assert cleanup_scratch() == 1
    assert not temp_store.exists(name)
