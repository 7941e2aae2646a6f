import io
import zipfile
from pathlib import Path

import pytest

from app.archive.builder import ArchiveBuilder, archive_name
from app.archive.exceptions import ArchiveBuildError
from app.extraction.models import Frame
from app.validation.exceptions import PathEscapesRootError


class TestArchiveName:
    def test_uses_job_timestamp(self) -> None:
        assert archive_name("20240101_120000_ab12cd34") == "frames_20240101_120000_ab12cd34.zip"


class TestBuildInMemory:
    def test_entry_count_matches_frame_count(self, frames: list[Frame]) -> None:
        data = ArchiveBuilder().build(frames)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert len(archive.infolist()) == len(frames)

    def test_entries_are_basenames_in_extraction_order(self, frames: list[Frame]) -> None:
        data = ArchiveBuilder().build(frames)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = archive.namelist()
        assert names == [frame.path.name for frame in frames]
        assert all("/" not in name and "\\" not in name for name in names)

    def test_entries_are_deflated_and_intact(self, frames: list[Frame]) -> None:
        data = ArchiveBuilder().build(frames)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.testzip() is None
            for info in archive.infolist():
                assert info.compress_type == zipfile.ZIP_DEFLATED
            assert archive.read(frames[0].path.name) == frames[0].path.read_bytes()

    def test_flattens_nested_frame_paths(self, tmp_path: Path, make_frames) -> None:  # type: ignore[no-untyped-def]
        nested = make_frames(tmp_path / "deep" / "er", 2)

        data = ArchiveBuilder().build(nested)

        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            assert archive.namelist() == ["frame_0001.png", "frame_0002.png"]

    def test_missing_frame_aborts_build(self, frames: list[Frame]) -> None:
        frames[2].path.unlink()

        with pytest.raises(ArchiveBuildError, match="frame_0003.png"):
            ArchiveBuilder().build(frames)


class TestBuildToPath:
    def test_writes_archive_inside_outputs(self, tmp_path: Path, frames: list[Frame]) -> None:
        outputs = tmp_path / "outputs"
        outputs.mkdir()

        result = ArchiveBuilder().build_to_path(frames, outputs / "frames_job.zip", outputs)

        assert result == outputs / "frames_job.zip"
        with zipfile.ZipFile(result) as archive:
            assert len(archive.namelist()) == 5

    def test_rejects_destination_outside_outputs(
        self, tmp_path: Path, frames: list[Frame]
    ) -> None:
        outputs = tmp_path / "outputs"
        outputs.mkdir()

        with pytest.raises(PathEscapesRootError):
            ArchiveBuilder().build_to_path(frames, outputs / ".." / "evil.zip", outputs)

        assert not (tmp_path / "evil.zip").exists()

    def test_partial_archive_is_removed_on_failure(
        self, tmp_path: Path, frames: list[Frame]
    ) -> None:
        outputs = tmp_path / "outputs"
        outputs.mkdir()
        frames[-1].path.unlink()

        with pytest.raises(ArchiveBuildError):
            ArchiveBuilder().build_to_path(frames, outputs / "frames_job.zip", outputs)

        assert not (outputs / "frames_job.zip").exists()

    def test_unwritable_destination_is_build_error(
        self, tmp_path: Path, frames: list[Frame]
    ) -> None:
        outputs = tmp_path / "outputs"

        with pytest.raises(ArchiveBuildError, match="Could not create archive"):
            ArchiveBuilder().build_to_path(frames, outputs / "missing" / "frames.zip", outputs)
