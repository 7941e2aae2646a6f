from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    uploads_dir: str = "uploads"
    outputs_dir: str = "outputs"
    temp_dir: str = "temp"

    storage_backend: str = "local"
    ffmpeg_path: str = "ffmpeg"
    download_url_prefix: str = "/api/v1/videos"

    aws_region: str = "us-east-1"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_endpoint_url: str = ""
    aws_external_url: str = ""

    s3_bucket_uploads: str = "framepack-uploads"
    s3_bucket_outputs: str = "framepack-outputs"
    presigned_url_ttl_seconds: int = 3600

    @property
    def is_s3_enabled(self) -> bool:
        return self.storage_backend.lower() == "s3"

    @property
    def is_local_endpoint(self) -> bool:
        """A custom endpoint (LocalStack, MinIO) means local development."""
        return bool(self.aws_endpoint_url)
