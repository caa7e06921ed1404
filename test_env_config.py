#!/usr/bin/env python3
"""
Tests for deployer configuration, the logger sinks and the aggregated error.
"""

import os
import sys

import pytest

# Add the current directory to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from byteplus_cdn import BytePlusCDNDeployerConfig
from byteplus_cdn.env_config import DEFAULT_REGION
from deployer import AggregatedDeployError, AssociationError, DefaultLogger, NilLogger
from uploader import UploadResult


def make_config(**overrides):
    values = {
        "access_key": "AKLTtestaccesskey",
        "secret_key": "testsecretkey",
        "domain": "example.com",
    }
    values.update(overrides)
    return BytePlusCDNDeployerConfig(**values)


@pytest.mark.parametrize("domain", ["example.com", "cdn.example.com", "*.example.com"])
def test_valid_domains_pass(domain):
    assert make_config(domain=domain).validate() == []


@pytest.mark.parametrize(
    "domain", ["", "localhost", "*.com", "a..example.com", "-a.example.com", "a.*.example.com"]
)
def test_invalid_domains_fail(domain):
    assert make_config(domain=domain).validate()


def test_credentials_are_required():
    errors = make_config(access_key=" ", secret_key="").validate()

    assert any("access key is required" in e for e in errors)
    assert any("secret key is required" in e for e in errors)


def test_long_credentials_are_accepted():
    assert make_config(access_key="A" * 128, secret_key="s" * 128).validate() == []


def test_is_wildcard():
    assert make_config(domain="*.example.com").is_wildcard()
    assert not make_config(domain="example.com").is_wildcard()


def test_from_dict_accepts_stored_keys():
    config = BytePlusCDNDeployerConfig.from_dict(
        {"accessKey": "ak", "secretKey": "sk", "domain": "*.example.com"}
    )

    assert config.access_key == "ak"
    assert config.secret_key == "sk"
    assert config.domain == "*.example.com"
    assert config.region == DEFAULT_REGION


def test_from_env(monkeypatch):
    monkeypatch.setenv("BYTEPLUS_ACCESS_KEY", "ak")
    monkeypatch.setenv("BYTEPLUS_SECRET_KEY", "sk")
    monkeypatch.setenv("BYTEPLUS_CDN_DOMAIN", "example.com")
    monkeypatch.setenv("BYTEPLUS_TIMEOUT", "10")

    config = BytePlusCDNDeployerConfig.from_env()

    assert (config.access_key, config.secret_key, config.domain) == ("ak", "sk", "example.com")
    assert config.timeout == 10


def test_repr_masks_secret():
    assert "testsecretkey" not in repr(make_config())
    assert "testsecretkey" not in repr(make_config().to_uploader_config())


def test_config_is_immutable():
    config = make_config()

    with pytest.raises(Exception):
        config.domain = "other.example.com"


def test_default_logger_records_and_flushes():
    sink = DefaultLogger(name="test-sink")

    sink.logt("certificate file uploaded", UploadResult(cert_id="cert-1"))
    sink.logf("deployed to %d domain(s)", 2)
    sink.logt("no payload")

    records = sink.get_records()
    assert records[0] == 'certificate file uploaded: {"cert_id": "cert-1", "cert_name": ""}'
    assert records[1] == "deployed to 2 domain(s)"
    assert records[2] == "no payload"

    sink.flush_records()
    assert sink.get_records() == []


def test_default_logger_renders_unserialisable_payload():
    sink = DefaultLogger(name="test-sink")

    sink.logt("payload", {"when": object()})

    assert sink.get_records()[0].startswith('payload: {"when": "<object object')


def test_nil_logger_discards_everything():
    sink = NilLogger()

    sink.logt("anything", {"a": 1})
    sink.logf("%s", "x")

    assert sink.get_records() == []


def test_aggregated_error_renders_all_failures():
    errors = [
        AssociationError("a.example.com", RuntimeError("boom")),
        AssociationError("b.example.com", RuntimeError("bang")),
    ]

    error = AggregatedDeployError(errors)

    assert error.domains == ["a.example.com", "b.example.com"]
    assert list(error) == errors
    assert str(error) == (
        "failed to deploy certificate to domain 'a.example.com': boom\n"
        "failed to deploy certificate to domain 'b.example.com': bang"
    )


def test_aggregated_error_requires_entries():
    with pytest.raises(ValueError):
        AggregatedDeployError([])


def test_association_error_chains_cause():
    cause = RuntimeError("boom")

    error = AssociationError("a.example.com", cause)

    assert error.cause is cause
    assert error.__cause__ is cause
