from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from depfetch.common import AppInfo, LoggingConfig


class Settings(BaseSettings):
    app: AppInfo = AppInfo()
    logging: LoggingConfig = LoggingConfig()

    job_id: str = "0"
    api_url: str = "http://localhost:3001"
    job_token: SecretStr | None = None

    job_path: Path = Path("job.json")
    output_path: Path = Path("output.json")
    snapshot_path: Path | None = None
    repo_contents_path: Path | None = None

    enable_connectivity_check: bool = False
    single_process: bool = False

    model_config = SettingsConfigDict(
        env_prefix="DEPFETCH_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        nested_model_default_partial_update=True,
    )

    def resolved_snapshot_path(self) -> Path | None:
        """Where the combined job snapshot goes, or None outside single-process mode."""
        if not self.single_process:
            return None
        return self.snapshot_path or self.job_path
