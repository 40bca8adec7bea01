"""Tests for settings loading."""

import os

import pytest
from unittest.mock import patch

from vizsnp.config import DEFAULT_BATCH_SIZE, DEFAULT_LIMIT, Settings
from vizsnp.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep VIZSNP_* variables and stray .env files out of these tests."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"VIZSNP_{name.upper()}", raising=False)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.batch_size == DEFAULT_BATCH_SIZE
        assert settings.limit == DEFAULT_LIMIT
        assert settings.species == "human"
        assert settings.high_impact_only is True
        assert settings.deadline is None

    def test_load_ignores_none(self):
        settings = Settings.load(batch_size=None, limit=10)
        assert settings.batch_size == DEFAULT_BATCH_SIZE
        assert settings.limit == 10

    @pytest.mark.parametrize(
        "overrides",
        [
            {"batch_size": 0},
            {"limit": -1},
            {"species": "Homo sapiens"},
            {"timeout": 0},
            {"deadline": -5},
        ],
    )
    def test_load_invalid(self, overrides):
        with pytest.raises(ConfigError):
            Settings.load(**overrides)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("VIZSNP_BATCH_SIZE", "50")
        monkeypatch.setenv("VIZSNP_VEP_URL", "http://localhost:8080")
        monkeypatch.setenv("VIZSNP_HIGH_IMPACT_ONLY", "false")

        settings = Settings.from_env()

        assert settings.batch_size == 50
        assert settings.vep_url == "http://localhost:8080"
        assert settings.high_impact_only is False

    def test_overrides_win_over_env(self, monkeypatch):
        monkeypatch.setenv("VIZSNP_LIMIT", "5")
        assert Settings.from_env(limit=20).limit == 20
        assert Settings.from_env(limit=None).limit == 5

    def test_from_dotenv_file_in_working_directory(self, tmp_path):
        """A .env next to the user's data is found, wherever the package lives."""
        (tmp_path / ".env").write_text("VIZSNP_SPECIES=mus_musculus\nVIZSNP_LOG_LEVEL=debug\n")

        # load_dotenv writes to os.environ; restore it afterwards
        with patch.dict(os.environ):
            settings = Settings.from_env()

        assert settings.species == "mus_musculus"
        assert settings.log_level == "DEBUG"
        assert "VIZSNP_SPECIES" not in os.environ

    @pytest.mark.parametrize("species", ["mus_musculus", "mus_musculus_c57bl6nj", "danio_rerio"])
    def test_species_accepted(self, species):
        assert Settings.load(species=species).species == species

    @pytest.mark.parametrize("level, expected", [("debug", "DEBUG"), (" Warning ", "WARNING"), ("INFO", "INFO")])
    def test_log_level_normalized(self, level, expected):
        assert Settings.load(log_level=level).log_level == expected

    @pytest.mark.parametrize("level", ["verbose", "", "10"])
    def test_log_level_invalid(self, level):
        with pytest.raises(ConfigError):
            Settings.load(log_level=level)

    def test_log_level_invalid_from_env(self, monkeypatch):
        monkeypatch.setenv("VIZSNP_LOG_LEVEL", "loud")
        with pytest.raises(ConfigError):
            Settings.from_env()

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("VIZSNP_BATCH_SIZE", "many")
        with pytest.raises(ConfigError):
            Settings.from_env()
