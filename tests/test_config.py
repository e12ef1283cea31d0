"""Tests for configuration loading and validation."""

import pytest

from authorsync.config import MIN_CONFIDENCE_ENV, ConfigLoader
from authorsync.errors import ConfigurationError
from authorsync.models import Identity


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv(MIN_CONFIDENCE_ENV, raising=False)


def write_config(tmp_path, content):
    path = tmp_path / "authorsync.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestConfigLoader:
    """Tests for ConfigLoader.load and ConfigLoader.default."""

    def test_default_configuration(self):
        config = ConfigLoader.default()

        assert config.identity.min_confidence == 0.6
        assert config.identity.rerank_canonical is True
        assert config.identity.exclude_emails == []
        assert config.output.comments is True
        assert config.output.format == "text"
        assert config.config_path is None

    def test_loads_all_sections(self, tmp_path):
        path = write_config(
            tmp_path,
            'version: "1.0"\n'
            "identity:\n"
            "  min_confidence: 0.75\n"
            "  rerank_canonical: false\n"
            "  exclude_emails:\n"
            '    - "*@localhost"\n'
            "output:\n"
            "  comments: false\n"
            "  format: json\n",
        )
        config = ConfigLoader.load(path)

        assert config.identity.min_confidence == 0.75
        assert config.identity.rerank_canonical is False
        assert config.identity.exclude_emails == ["*@localhost"]
        assert config.output.comments is False
        assert config.output.format == "json"
        assert config.config_path == path

    def test_empty_file_uses_defaults(self, tmp_path):
        config = ConfigLoader.load(write_config(tmp_path, ""))
        assert config.identity.min_confidence == 0.6

    def test_unquoted_version_is_accepted(self, tmp_path):
        config = ConfigLoader.load(write_config(tmp_path, "version: 1\n"))
        assert config.output.format == "text"

    def test_unsupported_version(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unsupported configuration version: 2"):
            ConfigLoader.load(write_config(tmp_path, "version: 2\n"))

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Invalid YAML syntax"):
            ConfigLoader.load(write_config(tmp_path, "identity: [unclosed\n"))

    def test_non_mapping_document(self, tmp_path):
        with pytest.raises(ConfigurationError, match="must be a YAML mapping"):
            ConfigLoader.load(write_config(tmp_path, "- just\n- a list\n"))

    def test_non_mapping_section(self, tmp_path):
        with pytest.raises(ConfigurationError, match="'identity' section must be a mapping"):
            ConfigLoader.load(write_config(tmp_path, "identity: strict\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader.load(tmp_path / "missing.yaml")

    def test_confidence_out_of_range(self, tmp_path):
        with pytest.raises(ConfigurationError, match="between 0 and 1"):
            ConfigLoader.load(write_config(tmp_path, "identity:\n  min_confidence: 1.5\n"))

    def test_non_numeric_confidence(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Invalid configuration value"):
            ConfigLoader.load(write_config(tmp_path, "identity:\n  min_confidence: high\n"))

    def test_unknown_output_format(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Unknown output format 'csv'"):
            ConfigLoader.load(write_config(tmp_path, "output:\n  format: csv\n"))

    def test_error_message_names_file(self, tmp_path):
        path = write_config(tmp_path, "output:\n  format: csv\n")
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.load(path)
        assert exc_info.value.config_path == path
        assert "📁 File:" in str(exc_info.value)


class TestEnvironment:
    """Tests for environment variable handling."""

    def test_resolves_variable_references(self, tmp_path, monkeypatch):
        monkeypatch.setenv("COMPANY_DOMAIN", "acme.com")
        path = write_config(
            tmp_path, "identity:\n  exclude_emails:\n    - ci@${COMPANY_DOMAIN}\n"
        )
        assert ConfigLoader.load(path).identity.exclude_emails == ["ci@acme.com"]

    def test_unset_variable_resolves_to_empty(self, tmp_path, monkeypatch):
        monkeypatch.delenv("AUTHORSYNC_TEST_UNSET", raising=False)
        path = write_config(
            tmp_path, 'identity:\n  exclude_emails:\n    - "${AUTHORSYNC_TEST_UNSET}"\n'
        )
        assert ConfigLoader.load(path).identity.exclude_emails == [""]

    def test_environment_overrides_confidence(self, monkeypatch):
        monkeypatch.setenv(MIN_CONFIDENCE_ENV, "0.9")
        assert ConfigLoader.default().identity.min_confidence == 0.9

    def test_invalid_environment_override(self, monkeypatch):
        monkeypatch.setenv(MIN_CONFIDENCE_ENV, "lots")
        with pytest.raises(ConfigurationError, match="must be a number"):
            ConfigLoader.default()

    def test_loads_dotenv_next_to_config(self, tmp_path, monkeypatch):
        """Values from .env.local win over .env."""
        # load_dotenv writes os.environ; monkeypatch restores it afterwards
        monkeypatch.setenv(MIN_CONFIDENCE_ENV, "0.5")
        (tmp_path / ".env").write_text(f"{MIN_CONFIDENCE_ENV}=0.7\n", encoding="utf-8")
        (tmp_path / ".env.local").write_text(f"{MIN_CONFIDENCE_ENV}=0.8\n", encoding="utf-8")

        config = ConfigLoader.load(write_config(tmp_path, "identity:\n  min_confidence: 0.6\n"))

        assert config.identity.min_confidence == 0.8


class TestExclusions:
    """Tests for email exclusion patterns."""

    def test_filters_matching_identities(self, tmp_path):
        path = write_config(
            tmp_path, 'identity:\n  exclude_emails:\n    - "*@localhost"\n    - "ci@acme.com"\n'
        )
        config = ConfigLoader.load(path)
        identities = [
            Identity("root", "root@localhost", 3),
            Identity("CI", "CI@Acme.com", 40),
            Identity("Jane", "jane@acme.com", 9),
        ]
        assert config.filter_identities(identities) == [Identity("Jane", "jane@acme.com", 9)]

    def test_no_patterns_keeps_everything(self, team_identities):
        config = ConfigLoader.default()
        assert config.filter_identities(team_identities) == team_identities
