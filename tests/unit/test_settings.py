from pathlib import Path

import pytest
from pydantic import ValidationError

from app.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep a developer's .env or exported variables out of these tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "STORAGE_BACKEND",
        "AWS_ENDPOINT_URL",
        "OUTPUTS_DIR",
        "PRESIGNED_URL_TTL_SECONDS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.storage_backend == "local"
        assert settings.uploads_dir == "uploads"
        assert settings.outputs_dir == "outputs"
        assert settings.temp_dir == "temp"
        assert settings.ffmpeg_path == "ffmpeg"
        assert settings.presigned_url_ttl_seconds == 3600
        assert settings.is_s3_enabled is False
        assert settings.is_local_endpoint is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "S3")
        monkeypatch.setenv("AWS_ENDPOINT_URL", "http://localstack:4566")
        monkeypatch.setenv("PRESIGNED_URL_TTL_SECONDS", "120")

        settings = Settings()

        assert settings.is_s3_enabled is True
        assert settings.is_local_endpoint is True
        assert settings.presigned_url_ttl_seconds == 120

    def test_reads_dotenv_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("OUTPUTS_DIR=/srv/archives\nLOG_LEVEL=DEBUG\n")

        settings = Settings()

        assert settings.outputs_dir == "/srv/archives"
        assert settings.log_level == "DEBUG"

    def test_invalid_ttl_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRESIGNED_URL_TTL_SECONDS", "soon")

        with pytest.raises(ValidationError):
            Settings()
