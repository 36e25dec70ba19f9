"""Unit tests for corpus path classification and new-corpus detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from fuzztriage.core.corpus_detector import CorpusDetector, classify_corpus_path, split_path
from fuzztriage.core.git import GitWorkTree
from fuzztriage.core.gotool import GoToolchain
from fuzztriage.core.process import CommandError

from conftest import FakeRunner


def _detector(runner: FakeRunner, cwd: Path) -> CorpusDetector:
    return CorpusDetector(GitWorkTree(runner, cwd), GoToolchain(runner, cwd))


def _stage(runner: FakeRunner, *paths: str) -> FakeRunner:
    runner.on("git", "diff", "--cached", "--exit-code", exit_code=1 if paths else 0)
    runner.on("git", "diff", "--name-only", stdout="".join(f"{p}\0" for p in paths))
    return runner


# ---------------------------------------------------------------------------
# Test: split_path / classify_corpus_path (pure)
# ---------------------------------------------------------------------------


class TestSplitPath:
    def test_forward_slashes(self):
        assert split_path("a/b/c") == ["a", "b", "c"]

    def test_backslashes(self):
        assert split_path("a\\testdata\\fuzz\\FuzzX\\id") == ["a", "testdata", "fuzz", "FuzzX", "id"]

    def test_drops_empty_segments(self):
        assert split_path("/a//b/") == ["a", "b"]


class TestClassifyCorpusPath:
    def test_matches_convention(self):
        match = classify_corpus_path(["pkg", "testdata", "fuzz", "FuzzParse", "a1b2c3"])
        assert match is not None
        assert match.package_dir == "pkg"
        assert match.test_func == "FuzzParse"
        assert match.corpus_id == "a1b2c3"

    def test_nested_package_dir(self):
        match = classify_corpus_path(split_path("internal/codec/testdata/fuzz/FuzzDecode/ff00"))
        assert match is not None
        assert match.package_dir == "internal/codec"

    def test_exactly_four_segments_is_root_package(self):
        match = classify_corpus_path(["testdata", "fuzz", "FuzzParse", "a1b2c3"])
        assert match is not None
        assert match.package_dir == ""

    @pytest.mark.parametrize(
        "path",
        [
            "fuzz/FuzzParse/a1b2c3",
            "pkg/testdata/FuzzParse/a1b2c3",
            "pkg/testdata/fuzz/TestParse/a1b2c3",
            "pkg/testdata/fuzz/fuzzParse/a1b2c3",
            "pkg/data/fuzz/FuzzParse/a1b2c3",
            "pkg/testdata/fuzz/FuzzParse",
            "pkg/parse.go",
            "",
        ],
    )
    def test_rejects_other_paths(self, path: str):
        assert classify_corpus_path(split_path(path)) is None


# ---------------------------------------------------------------------------
# Test: CorpusDetector
# ---------------------------------------------------------------------------


class TestDetectNewCorpus:
    def test_no_staged_changes_returns_none(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner)
        assert _detector(fake_runner, tmp_path).detect_new_corpus() is None
        assert fake_runner.ran("git", "add", ".")
        assert not fake_runner.ran("git", "diff", "--name-only")

    def test_single_match(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "pkg/testdata/fuzz/FuzzParse/a1b2c3", "pkg/parse.go")
        fake_runner.on("go", "list", "./pkg", stdout="example.com/mod/pkg\n")

        artifact = _detector(fake_runner, tmp_path).detect_new_corpus()

        assert artifact is not None
        assert artifact.package == "example.com/mod/pkg"
        assert artifact.test_func == "FuzzParse"
        assert artifact.corpus_id == "a1b2c3"
        assert artifact.path == "pkg/testdata/fuzz/FuzzParse/a1b2c3"

    def test_non_ascii_corpus_id_is_detected(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "pkg/testdata/fuzz/FuzzParse/séed ü")
        fake_runner.on("go", "list", "./pkg", stdout="example.com/mod/pkg\n")

        artifact = _detector(fake_runner, tmp_path).detect_new_corpus()

        assert artifact is not None
        assert artifact.corpus_id == "séed ü"
        assert artifact.path == "pkg/testdata/fuzz/FuzzParse/séed ü"

    @pytest.mark.parametrize("count", [2, 3, 7])
    def test_multiple_matches_return_none(self, fake_runner: FakeRunner, tmp_path: Path, count: int):
        paths = [f"pkg/testdata/fuzz/FuzzParse/{i:04x}" for i in range(count)]
        _stage(fake_runner, *paths)

        assert _detector(fake_runner, tmp_path).detect_new_corpus() is None
        assert not fake_runner.ran("go", "list")

    def test_unrelated_changes_only_return_none(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "go.sum", "pkg/testdata/golden.txt")
        assert _detector(fake_runner, tmp_path).detect_new_corpus() is None

    def test_lists_additions_only(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "pkg/testdata/fuzz/FuzzParse/a1b2c3")
        _detector(fake_runner, tmp_path).detect_new_corpus()
        listing = [c for c in fake_runner.commands("git") if "--name-only" in c]
        assert listing == [
            ["git", "diff", "--name-only", "-z", "--cached", "--no-renames", "--diff-filter=d", "--relative"]
        ]

    def test_package_falls_back_to_directory(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "pkg/testdata/fuzz/FuzzParse/a1b2c3")
        fake_runner.on("go", "list", stdout="")
        artifact = _detector(fake_runner, tmp_path).detect_new_corpus()
        assert artifact is not None
        assert artifact.package == "pkg"

    def test_root_package_lists_dot(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "testdata/fuzz/FuzzParse/a1b2c3")
        fake_runner.on("go", "list", ".", stdout="example.com/mod\n")
        artifact = _detector(fake_runner, tmp_path).detect_new_corpus()
        assert artifact is not None
        assert artifact.package == "example.com/mod"

    def test_git_failure_propagates(self, fake_runner: FakeRunner, tmp_path: Path):
        fake_runner.on("git", "add", exit_code=128, stderr="fatal: not a git repository")
        with pytest.raises(CommandError, match="not a git repository"):
            _detector(fake_runner, tmp_path).detect_new_corpus()

    def test_go_list_failure_propagates(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(fake_runner, "pkg/testdata/fuzz/FuzzParse/a1b2c3")
        fake_runner.on("go", "list", exit_code=1, stderr="no Go files")
        with pytest.raises(CommandError):
            _detector(fake_runner, tmp_path).detect_new_corpus()


class TestFindCandidates:
    def test_returns_every_match(self, fake_runner: FakeRunner, tmp_path: Path):
        _stage(
            fake_runner,
            "a/testdata/fuzz/FuzzA/1",
            "b/testdata/fuzz/FuzzB/2",
            "README.md",
        )
        assert _detector(fake_runner, tmp_path).find_candidates() == [
            "a/testdata/fuzz/FuzzA/1",
            "b/testdata/fuzz/FuzzB/2",
        ]

    def test_to_artifact_rejects_non_corpus_path(self, fake_runner: FakeRunner, tmp_path: Path):
        with pytest.raises(ValueError):
            _detector(fake_runner, tmp_path).to_artifact("pkg/parse.go")
