"""Readable summaries of PEM encoded x.509 certificates."""

from __future__ import annotations

from typing import Any

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import dsa, ec, ed448, ed25519, rsa

PEM_BEGIN = "-----BEGIN CERTIFICATE-----"
PEM_END = "-----END CERTIFICATE-----"


def looks_like_certificate(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    text = value.strip()
    return text.startswith(PEM_BEGIN) and text.endswith(PEM_END)


def load_certificate(value: str) -> x509.Certificate | None:
    """Decode a PEM certificate, or return None when it does not parse."""
    if not looks_like_certificate(value):
        return None
    try:
        return x509.load_pem_x509_certificate(value.strip().encode("ascii"))
    except ValueError:
        return None


def describe_certificate(value: str) -> str | None:
    certificate = load_certificate(value)
    if certificate is None:
        return None

    lines = [
        f"Subject: {certificate.subject.rfc4514_string()}",
        f"Issuer: {certificate.issuer.rfc4514_string()}",
        f"Serial Number: {certificate.serial_number:x}",
        "Validity Period",
        f"  {certificate.not_valid_before_utc.isoformat()} - "
        f"{certificate.not_valid_after_utc.isoformat()}",
        f"Public Key: {_public_key_summary(certificate)}",
    ]
    signature_hash = certificate.signature_hash_algorithm
    if signature_hash is not None:
        lines.append(f"Signature Hash: {signature_hash.name}")

    try:
        alt_names = certificate.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        alt_names = None
    if alt_names is not None:
        names = [str(name.value) for name in alt_names.value]
        lines.append("Subject Alternative Names: " + ", ".join(names))

    lines.append(f"Fingerprint (SHA-256): {certificate.fingerprint(hashes.SHA256()).hex(':')}")
    return "\n".join(lines)


def _public_key_summary(certificate: x509.Certificate) -> str:
    key = certificate.public_key()
    if isinstance(key, rsa.RSAPublicKey):
        return f"RSA {key.key_size} bit"
    if isinstance(key, ec.EllipticCurvePublicKey):
        return f"EC {key.curve.name}"
    if isinstance(key, dsa.DSAPublicKey):
        return f"DSA {key.key_size} bit"
    if isinstance(key, ed25519.Ed25519PublicKey):
        return "Ed25519"
    if isinstance(key, ed448.Ed448PublicKey):
        return "Ed448"
    return type(key).__name__
