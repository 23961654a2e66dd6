from pathlib import Path

import pytest
from pydantic import ValidationError

from consolidator.config.settings import Settings


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's .env or config.yaml out of these tests."""
    monkeypatch.chdir(tmp_path)


class TestSettingsDefaults:
    def test_default_log_level(self) -> None:
        s = Settings()
        assert s.log_level == "INFO"
        assert s.log_path is None

    def test_declares_only_read_fields(self) -> None:
        assert "app_env" not in Settings.model_fields

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_table_names(self) -> None:
        s = Settings()
        assert s.table_cases == "file_input"
        assert s.table_case_details == "eam_file"
        assert s.table_records == "eam_record"
        assert s.table_record_paths == "input_pdf"

    def test_default_image_action_keeps_sources(self) -> None:
        s = Settings()
        assert s.image_action == "keep"

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pymupdf"

    def test_default_log_path_is_none(self) -> None:
        s = Settings()
        assert s.log_path is None


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_storage_root_as_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STORAGE_ROOT", "/mnt/pdf")
        s = Settings()
        assert s.storage_root == Path("/mnt/pdf")

    def test_loads_concurrency(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONCURRENCY", "16")
        s = Settings()
        assert s.concurrency == 16

    def test_loads_image_action(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IMAGE_ACTION", "move")
        s = Settings()
        assert s.image_action == "move"


class TestSettingsFromYaml:
    def test_loads_values_from_config_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text(
            "max_per_dir: 50\nimage_action: delete\ntable_records: archive_record\n",
            encoding="utf-8",
        )
        s = Settings()
        assert s.max_per_dir == 50
        assert s.image_action == "delete"
        assert s.table_records == "archive_record"

    def test_env_overrides_config_yaml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "config.yaml").write_text("max_per_dir: 50\n", encoding="utf-8")
        monkeypatch.setenv("MAX_PER_DIR", "70")
        s = Settings()
        assert s.max_per_dir == 70


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_unknown_image_action_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IMAGE_ACTION", "shred")
        with pytest.raises(ValidationError):
            Settings()

    def test_zero_max_per_dir_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_PER_DIR", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_zero_concurrency_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CONCURRENCY", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_table_name_must_be_identifier(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TABLE_RECORDS", "eam_record; DROP TABLE x")
        with pytest.raises(ValidationError):
            Settings()
