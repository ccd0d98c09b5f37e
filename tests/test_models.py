"""
Unit tests for configuration and progress-state models.
"""
import pytest
from treesum.core.models import (
    ALL_FILES, ChecksumMode, CollisionPolicy, OutputMode, ProgressState,
    RunConfig, RunResult, RunState, DiscoveredFile
)


class TestRunConfig:
    """RunConfig validates and normalizes its fields on creation."""

    def test_defaults(self):
        config = RunConfig(search_path="/data", save_path="/out")
        assert config.extension_filter == ALL_FILES
        assert config.tag == ""
        assert config.output_mode == OutputMode.AGGREGATE
        assert config.checksum_mode == ChecksumMode.TEXT
        assert config.collision_policy == CollisionPolicy.ERROR
        assert config.workers == 1
        assert not config.filters_extension

    def test_extension_filter_leading_dot_is_dropped(self):
        config = RunConfig(search_path="/data", save_path="/out", extension_filter=".TXT")
        assert config.extension_filter == "TXT"
        assert config.filters_extension

    def test_empty_extension_filter_means_all_files(self):
        config = RunConfig(search_path="/data", save_path="/out", extension_filter="")
        assert config.extension_filter == ALL_FILES

    def test_is_immutable(self):
        config = RunConfig(search_path="/data", save_path="/out")
        with pytest.raises(AttributeError):
            config.tag = "v2"

    @pytest.mark.parametrize("kwargs", [
        {"search_path": "", "save_path": "/out"},
        {"search_path": "/data", "save_path": ""},
        {"search_path": "/data", "save_path": "/out", "workers": 0},
        {"search_path": "/data", "save_path": "/out", "tag": "a/b"},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            RunConfig(**kwargs)

    def test_from_human_readable_mode_aliases(self):
        assert RunConfig.from_human_readable("/d", "/o", mode="single").output_mode == OutputMode.AGGREGATE
        assert RunConfig.from_human_readable("/d", "/o", mode="dir").output_mode == OutputMode.PER_DIRECTORY
        assert RunConfig.from_human_readable("/d", "/o", mode="Split").output_mode == OutputMode.PER_FILE

    def test_from_human_readable_flags(self):
        config = RunConfig.from_human_readable(
            "/d", "/o", binary=True, allow_merge=True, algorithm=" XXH64 ", workers=3
        )
        assert config.checksum_mode == ChecksumMode.BINARY
        assert config.collision_policy == CollisionPolicy.MERGE
        assert config.algorithm == "xxh64"
        assert config.workers == 3

    def test_from_human_readable_defaults_save_path_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = RunConfig.from_human_readable("/d")
        assert config.save_path == str(tmp_path)

    def test_from_human_readable_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown output mode"):
            RunConfig.from_human_readable("/d", "/o", mode="everything")

    def test_missing_tag_means_no_tag(self):
        config = RunConfig(search_path="/data", save_path="/out", tag=None)
        assert config.tag == ""

    def test_tag_is_stripped(self):
        assert RunConfig(search_path="/data", save_path="/out", tag="  v1 ").tag == "v1"

    def test_unknown_algorithm_rejected(self):
        with pytest.raises(ValueError, match="Unknown digest algorithm"):
            RunConfig(search_path="/data", save_path="/out", algorithm="crc99")

    def test_algorithm_name_normalized(self):
        assert RunConfig(search_path="/data", save_path="/out", algorithm=" SHA256").algorithm == "sha256"


class TestProgressState:
    """ProgressState.advance returns a new state and an optional percent."""

    def test_first_advance_emits_zero(self):
        state = ProgressState(total_count=200)
        state, percent = state.advance(0)
        assert percent == 0
        assert state.last_emitted_percent == 0

    def test_same_percent_not_emitted_twice(self):
        state = ProgressState(total_count=200)
        state, _ = state.advance(0)
        state, percent = state.advance(1)  # 100 // 200 == 0
        assert percent is None
        assert state.processed_count == 1

    def test_integer_division(self):
        state = ProgressState(total_count=3)
        _, percent = state.advance(2)
        assert percent == 66

    def test_original_state_unchanged(self):
        state = ProgressState(total_count=4)
        state.advance(2)
        assert state.last_emitted_percent == -1

    def test_zero_total_rejected(self):
        with pytest.raises(ValueError):
            ProgressState(total_count=0).advance(0)


class TestSmallModels:

    def test_discovered_file_derived_attributes(self):
        f = DiscoveredFile(path="/data/set/a/f1.txt")
        assert f.name == "f1.txt"
        assert f.directory == "/data/set/a"

    def test_checksum_mode_markers(self):
        assert ChecksumMode.TEXT.marker == " "
        assert ChecksumMode.BINARY.marker == "*"

    def test_run_result_summary(self):
        result = RunResult(state=RunState.COMPLETED, processed_count=2, elapsed_text="<1 second")
        assert result.summary == "2 files processed in <1 second"

    def test_terminal_states(self):
        assert RunState.COMPLETED.is_terminal
        assert RunState.NO_FILES_FOUND.is_terminal
        assert RunState.FATAL.is_terminal
        assert not RunState.PROCESSING.is_terminal
