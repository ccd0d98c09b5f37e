"""
Unit tests for PathResolver: canonical paths and validation errors.
"""
import os
import pytest
from treesum.core.resolver import PathResolver
from treesum.core.errors import PathError, UsageError


class TestPathResolver:

    def test_resolves_relative_paths(self, temp_dir, monkeypatch):
        (temp_dir / "data" / "set").mkdir(parents=True)
        (temp_dir / "out").mkdir()
        monkeypatch.chdir(temp_dir / "data")

        search, save = PathResolver().resolve("./set/../set", "../out")

        assert search == str(temp_dir / "data" / "set")
        assert save == str(temp_dir / "out")

    def test_follows_symlinks(self, temp_dir):
        real = temp_dir / "real"
        real.mkdir()
        link = temp_dir / "link"
        try:
            link.symlink_to(real, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("Symlinks not supported")

        search, _ = PathResolver().resolve(str(link), str(temp_dir))
        assert search == str(real)

    def test_save_path_defaults_to_cwd(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        _, save = PathResolver().resolve(str(temp_dir))
        assert save == str(temp_dir)

    def test_missing_search_path(self, temp_dir):
        with pytest.raises(PathError) as exc:
            PathResolver().resolve(str(temp_dir / "nope"), str(temp_dir))
        assert "nope" in str(exc.value)

    def test_missing_save_path(self, temp_dir):
        with pytest.raises(PathError, match="Save path does not exist"):
            PathResolver().resolve(str(temp_dir), str(temp_dir / "nope"))

    def test_file_as_search_path_is_usage_error(self, temp_dir):
        f = temp_dir / "file.txt"
        f.write_text("x")
        with pytest.raises(UsageError):
            PathResolver().resolve(str(f), str(temp_dir))

    def test_file_as_save_path_is_usage_error(self, temp_dir):
        f = temp_dir / "file.txt"
        f.write_text("x")
        with pytest.raises(UsageError):
            PathResolver().resolve(str(temp_dir), str(f))

    def test_empty_search_path_is_usage_error(self):
        with pytest.raises(UsageError):
            PathResolver().resolve("", "/tmp")

    def test_unwritable_save_path(self, temp_dir, monkeypatch):
        out = temp_dir / "out"
        out.mkdir()
        original_access = os.access

        def fake_access(path, mode, *args, **kwargs):
            if str(path) == str(out) and mode & os.W_OK:
                return False
            return original_access(path, mode, *args, **kwargs)

        monkeypatch.setattr(os, "access", fake_access)

        with pytest.raises(PathError, match="No write access") as exc:
            PathResolver().resolve(str(temp_dir), str(out))
        assert exc.value.path == str(out)
