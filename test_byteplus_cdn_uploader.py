#!/usr/bin/env python3
"""
Tests for uploading certificates to the BytePlus CDN certificate center.
"""

import hashlib
import os
import sys
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

# Add the current directory to the path so we can import our modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from byteplus_cdn import BytePlusAPIError, BytePlusCDNUploader, BytePlusCDNUploaderConfig
from deployer import ConfigurationError, UploadError


@pytest.fixture(scope="module")
def certificate():
    """Self-signed certificate, its key and DER fingerprints."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "*.example.com")])
    now = datetime.now(timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=90))
        .sign(key, hashes.SHA256())
    )
    der = cert.public_bytes(serialization.Encoding.DER)
    return {
        "cert_pem": cert.public_bytes(serialization.Encoding.PEM).decode(),
        "key_pem": key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        ).decode(),
        "sha1": hashlib.sha1(der).hexdigest(),
        "sha256": hashlib.sha256(der).hexdigest(),
    }


def make_uploader(client):
    config = BytePlusCDNUploaderConfig(
        access_key="AKLTtestaccesskey", secret_key="testsecretkey"
    )
    return BytePlusCDNUploader(config, client=client)


def test_reuses_certificate_with_matching_fingerprints(certificate):
    client = Mock()
    client.list_cert_info.return_value = {
        "Total": 2,
        "CertInfo": [
            {
                "CertId": "cert-other",
                "Desc": "other",
                "CertFingerprint": {"Sha1": "00", "Sha256": "00"},
            },
            {
                "CertId": "cert-existing",
                "Desc": "certdeploy-1700000000000",
                "CertFingerprint": {
                    "Sha1": certificate["sha1"].upper(),
                    "Sha256": certificate["sha256"].upper(),
                },
            },
        ],
    }

    result = make_uploader(client).upload(certificate["cert_pem"], certificate["key_pem"])

    assert result.cert_id == "cert-existing"
    assert result.cert_name == "certdeploy-1700000000000"
    client.add_certificate.assert_not_called()


def test_uploads_when_no_match(certificate):
    client = Mock()
    client.list_cert_info.return_value = {"Total": 0, "CertInfo": []}
    client.add_certificate.return_value = {"CertId": "cert-new"}

    result = make_uploader(client).upload(certificate["cert_pem"], certificate["key_pem"])

    assert result.cert_id == "cert-new"
    assert result.cert_name.startswith("certdeploy-")
    args, kwargs = client.add_certificate.call_args
    assert args == (certificate["cert_pem"], certificate["key_pem"])
    assert kwargs["source"] == "cert_center"
    assert kwargs["desc"] == result.cert_name


def test_pages_through_certificate_list(certificate):
    filler = [
        {"CertId": f"cert-{i}", "CertFingerprint": {"Sha1": "00", "Sha256": "00"}}
        for i in range(100)
    ]
    match = {
        "CertId": "cert-page-2",
        "CertFingerprint": {"Sha1": certificate["sha1"], "Sha256": certificate["sha256"]},
    }
    client = Mock()
    client.list_cert_info.side_effect = [
        {"Total": 101, "CertInfo": filler},
        {"Total": 101, "CertInfo": [match]},
    ]

    result = make_uploader(client).upload(certificate["cert_pem"], certificate["key_pem"])

    assert result.cert_id == "cert-page-2"
    assert client.list_cert_info.call_count == 2
    assert client.list_cert_info.call_args.kwargs["page_num"] == 2


def test_invalid_certificate_raises_upload_error():
    client = Mock()

    with pytest.raises(UploadError, match="failed to parse certificate"):
        make_uploader(client).upload("not a certificate", "not a key")

    client.list_cert_info.assert_not_called()


def test_provider_failure_names_operation(certificate):
    client = Mock()
    client.list_cert_info.return_value = {"Total": 0, "CertInfo": []}
    client.add_certificate.side_effect = BytePlusAPIError(
        "AddCertificate", "certificate expired", code="InvalidCertificate"
    )

    with pytest.raises(UploadError, match="cdn.AddCertificate") as exc_info:
        make_uploader(client).upload(certificate["cert_pem"], certificate["key_pem"])

    assert isinstance(exc_info.value.__cause__, BytePlusAPIError)


def test_missing_certificate_id_is_an_error(certificate):
    client = Mock()
    client.list_cert_info.return_value = {"Total": 0, "CertInfo": []}
    client.add_certificate.return_value = {}

    with pytest.raises(UploadError):
        make_uploader(client).upload(certificate["cert_pem"], certificate["key_pem"])


def test_invalid_config_is_rejected():
    with pytest.raises(ConfigurationError):
        BytePlusCDNUploader(BytePlusCDNUploaderConfig(access_key="", secret_key=""))

    with pytest.raises(ConfigurationError, match="config is nil"):
        BytePlusCDNUploader(None)
