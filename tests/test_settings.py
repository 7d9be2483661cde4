"""Tests for configuration loading."""

from __future__ import annotations

from scope_chain.settings import ChainSettings, _find_settings_toml, get_settings
from tests.models import Comment


class TestChainSettings:
    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = ChainSettings()
        assert settings.vector.tsquery_function == "plainto_tsquery"
        assert settings.vector.language == "english"
        assert settings.vector.column_name == "vector"
        assert settings.text.case_insensitive is False
        assert settings.text.escape_char == "\\"

    def test_env_override(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SCOPE_CHAIN_VECTOR__LANGUAGE", "simple")
        monkeypatch.setenv("SCOPE_CHAIN_TEXT__CASE_INSENSITIVE", "true")
        settings = ChainSettings()
        assert settings.vector.language == "simple"
        assert settings.text.case_insensitive is True

    def test_unprefixed_env_ignored(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("LANGUAGE", "en_US:en")
        assert ChainSettings().vector.language == "english"

    def test_toml_file(self, tmp_path, monkeypatch):
        (tmp_path / "scope_chain.toml").write_text('[vector]\ncolumn_name = "tsv"\n')
        nested = tmp_path / "app" / "models"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert _find_settings_toml() == (tmp_path / "scope_chain.toml").resolve()
        assert ChainSettings().vector.column_name == "tsv"

    def test_init_beats_env(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SCOPE_CHAIN_VECTOR__LANGUAGE", "simple")
        assert ChainSettings(vector={"language": "french"}).vector.language == "french"


class TestEntitySettings:
    def test_global_settings_by_default(self):
        assert Comment.chain_settings() is get_settings()

    def test_entity_override(self, isolated_comment):
        override = ChainSettings(vector={"column_name": "tsv"})
        isolated_comment.search_settings = override
        assert isolated_comment.chain_settings() is override
        clause = isolated_comment.match_terms_using_vector("cats").conditions[-1]
        assert clause.text.startswith("(comments.tsv @@")
