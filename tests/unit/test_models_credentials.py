"""Tests for credential value models."""

import dataclasses
import json

import pytest

from stax_credentials.enums import AttemptOutcome, CredentialSource
from stax_credentials.exceptions import CredentialFormatError
from stax_credentials.models import ConfigDocument, ResolutionAttempt, ServiceAPICredentials


class TestServiceAPICredentials:
    """Test ServiceAPICredentials."""

    def test_gateway_defaults(self):
        assert ServiceAPICredentials("u", "p").ssh_gateway == "ssh.wpengine.net"
        assert ServiceAPICredentials("u", "p", ssh_gateway="").ssh_gateway == "ssh.wpengine.net"

    def test_immutable(self):
        creds = ServiceAPICredentials("u", "p")

        with pytest.raises(dataclasses.FrozenInstanceError):
            creds.api_user = "other"

    def test_complete(self):
        assert ServiceAPICredentials("u", "p").complete is True
        assert ServiceAPICredentials("u", "").complete is False
        assert ServiceAPICredentials("", "p").complete is False

    def test_repr_hides_password(self):
        text = repr(ServiceAPICredentials("deploy-bot", "s3cret"))

        assert "s3cret" not in text
        assert "deploy-bot" in text

    def test_json_round_trip(self):
        creds = ServiceAPICredentials("deploy-bot", "s3cret", "mysite", "ssh.example.net")

        assert ServiceAPICredentials.from_json(creds.to_json()) == creds
        assert json.loads(creds.to_json())["ssh_user"] == "mysite"

    def test_from_json_null_fields(self):
        creds = ServiceAPICredentials.from_json('{"api_user": "u", "api_password": null}')

        assert creds.api_password == ""
        assert creds.complete is False

    def test_from_json_rejects_non_object(self):
        with pytest.raises(ValueError, match="JSON object"):
            ServiceAPICredentials.from_json('"just a string"')


class TestResolutionAttempt:
    """Test ResolutionAttempt."""

    def test_to_dict_without_error(self):
        attempt = ResolutionAttempt(CredentialSource.NATIVE_STORE, "OS keyring", AttemptOutcome.UNAVAILABLE)

        assert attempt.to_dict() == {
            "source": "native-store",
            "description": "OS keyring",
            "outcome": "unavailable",
        }

    def test_to_dict_with_error(self):
        attempt = ResolutionAttempt(
            CredentialSource.CONFIG_FILE,
            "Credentials file /h/.stax/credentials.yml",
            AttemptOutcome.FAILED,
            CredentialFormatError("Failed to parse credentials file"),
        )

        assert attempt.to_dict()["error"] == "Failed to parse credentials file"


class TestConfigDocument:
    """Test ConfigDocument validation."""

    def test_defaults(self):
        doc = ConfigDocument()

        assert doc.wpengine.api_user == ""
        assert doc.github.token == ""
        assert doc.ssh.private_key_path == ""

    def test_sections_not_shared(self):
        first = ConfigDocument()
        first.github.token = "ghp_changed"

        assert ConfigDocument().github.token == ""

    def test_scalars_coerced_to_text(self):
        doc = ConfigDocument.model_validate(
            {"wpengine": {"api_password": 12345678, "ssh_user": True, "ssh_gateway": 1.5}}
        )

        assert doc.wpengine.api_password == "12345678"
        assert doc.wpengine.ssh_user == "true"
        assert doc.wpengine.ssh_gateway == "1.5"

    def test_null_section(self):
        doc = ConfigDocument.model_validate({"wpengine": None, "github": {"token": None}})

        assert doc.wpengine.api_user == ""
        assert doc.github.token == ""
