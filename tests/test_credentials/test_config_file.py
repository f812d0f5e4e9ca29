"""Tests for the YAML credentials file."""

import stat

import pytest

from stax_credentials.credentials import ConfigFileStore, CredentialFormatError, CredentialIOError
from stax_credentials.models import ConfigDocument


@pytest.fixture
def path(tmp_path):
    return tmp_path / ".stax" / "credentials.yml"


@pytest.fixture
def config_store(path):
    return ConfigFileStore(path)


def _mode(path):
    return stat.S_IMODE(path.stat().st_mode)


class TestLoad:
    """Test ConfigFileStore.load()."""

    def test_full_document(self, config_store, path):
        path.parent.mkdir()
        path.write_text(
            "wpengine:\n"
            "  api_user: deploy-bot\n"
            "  api_password: s3cret\n"
            "  ssh_user: mysite\n"
            "  ssh_gateway: ssh.example.net\n"
            "github:\n"
            "  token: ghp_file\n"
            "ssh:\n"
            "  private_key_path: ~/.ssh/id_ed25519\n"
        )

        doc = config_store.load()

        assert doc.wpengine.api_user == "deploy-bot"
        assert doc.wpengine.api_password == "s3cret"
        assert doc.wpengine.ssh_user == "mysite"
        assert doc.wpengine.ssh_gateway == "ssh.example.net"
        assert doc.github.token == "ghp_file"
        assert doc.ssh.private_key_path == "~/.ssh/id_ed25519"

    def test_missing_sections_default_empty(self, config_store, path):
        path.parent.mkdir()
        path.write_text("github:\n  token: ghp_file\n")

        doc = config_store.load()

        assert doc.wpengine.api_user == ""
        assert doc.ssh.private_key_path == ""

    def test_null_values_are_empty(self, config_store, path):
        """Test bare keys and empty sections load as empty strings."""
        path.parent.mkdir()
        path.write_text("wpengine:\n  api_user:\n  api_password: s3cret\ngithub:\nssh:\n")

        doc = config_store.load()

        assert doc.wpengine.api_user == ""
        assert doc.wpengine.api_password == "s3cret"
        assert doc.github.token == ""

    def test_empty_file_is_empty_document(self, config_store, path):
        path.parent.mkdir()
        path.write_text("")

        assert config_store.load().model_dump() == ConfigDocument().model_dump()

    def test_unknown_keys_ignored(self, config_store, path):
        path.parent.mkdir()
        path.write_text("gitlab:\n  token: glpat\ngithub:\n  token: ghp_file\n  scopes: repo\n")

        assert config_store.load().github.token == "ghp_file"

    def test_numbers_and_booleans_keep_source_text(self, config_store, path):
        """Test unquoted scalars load as the text the user wrote."""
        path.parent.mkdir()
        path.write_text(
            "wpengine:\n"
            "  api_user: deploy\n"
            "  api_password: 12345678\n"
            "  ssh_user: yes\n"
            "  ssh_gateway: 1.5\n"
            "github:\n"
            "  token: 0123\n"
        )

        doc = config_store.load()

        assert doc.wpengine.api_password == "12345678"
        assert doc.wpengine.ssh_user == "yes"
        assert doc.wpengine.ssh_gateway == "1.5"
        assert doc.github.token == "0123"

    def test_numeric_values_survive_save(self, config_store, path):
        path.parent.mkdir()
        path.write_text("wpengine:\n  api_user: deploy\n  api_password: 12345678\n")

        config_store.save(config_store.load())

        assert config_store.load().wpengine.api_password == "12345678"

    def test_not_utf8(self, config_store, path):
        """Test undecodable bytes are a format problem, not an IO failure."""
        path.parent.mkdir()
        path.write_bytes(b"github:\n  token: \xff\xfe\n")

        with pytest.raises(CredentialFormatError, match="not valid UTF-8") as exc_info:
            config_store.load()

        assert not isinstance(exc_info.value, CredentialIOError)

    def test_missing_file(self, config_store):
        with pytest.raises(CredentialFormatError, match="not found"):
            config_store.load()

    def test_invalid_yaml(self, config_store, path):
        path.parent.mkdir()
        path.write_text("wpengine: [unclosed\n")

        with pytest.raises(CredentialFormatError, match="Failed to parse") as exc_info:
            config_store.load()

        assert exc_info.value.reference == str(path)

    def test_non_mapping_document(self, config_store, path):
        path.parent.mkdir()
        path.write_text("- wpengine\n- github\n")

        with pytest.raises(CredentialFormatError, match="YAML mapping"):
            config_store.load()

    def test_section_with_wrong_shape(self, config_store, path):
        path.parent.mkdir()
        path.write_text("wpengine: just-a-string\n")

        with pytest.raises(CredentialFormatError, match="Invalid credentials file"):
            config_store.load()

    def test_directory_instead_of_file(self, config_store, path):
        path.mkdir(parents=True)

        with pytest.raises(CredentialIOError):
            config_store.load()


class TestSave:
    """Test ConfigFileStore.save()."""

    def test_round_trip(self, config_store):
        doc = ConfigDocument.model_validate(
            {"wpengine": {"api_user": "deploy-bot", "api_password": "s3cret"}, "github": {"token": "ghp_file"}}
        )

        config_store.save(doc)

        assert config_store.load().model_dump() == doc.model_dump()

    def test_creates_directory_and_owner_only_file(self, config_store, path):
        config_store.save(ConfigDocument())

        assert path.exists()
        assert _mode(path) == 0o600
        assert _mode(path.parent) == 0o700

    def test_tightens_existing_permissions(self, config_store, path):
        path.parent.mkdir()
        path.write_text("github:\n  token: old\n")
        path.chmod(0o644)

        doc = config_store.load()
        doc.github.token = "ghp_new"
        config_store.save(doc)

        assert _mode(path) == 0o600
        assert config_store.load().github.token == "ghp_new"

    def test_unwritable_location(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        config_store = ConfigFileStore(blocker / "credentials.yml")

        with pytest.raises(CredentialIOError, match="Failed to write"):
            config_store.save(ConfigDocument())


class TestPermissions:
    """Test ConfigFileStore.permissions()."""

    def test_reports_mode(self, config_store, path):
        path.parent.mkdir()
        path.write_text("")
        path.chmod(0o640)

        assert config_store.permissions() == 0o640

    def test_missing_file_raises(self, config_store):
        with pytest.raises(FileNotFoundError):
            config_store.permissions()

    def test_exists(self, config_store, path):
        assert config_store.exists() is False
        config_store.save(ConfigDocument())
        assert config_store.exists() is True
