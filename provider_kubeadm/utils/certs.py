"""Deterministic key and token derivation from the cluster token."""
import hashlib
import json
import re
from typing import List, Tuple

from ..errors import InvalidBootstrapTokenError

BOOTSTRAP_TOKEN_PATTERN = re.compile(r"^([a-z0-9]{6})\.([a-z0-9]{16})$")

# HTML-safe escapes, so revisions match those computed with Go's encoding/json
JSON_HTML_ESCAPES = {"<": "\\u003c", ">": "\\u003e", "&": "\\u0026", "\u2028": "\\u2028", "\u2029": "\\u2029"}


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def get_certificate_key(token: str) -> str:
    """Return the certificate key used to share control plane certificates."""
    return _sha256_hex(token.encode("utf-8"))


def transform_token(cluster_token: str) -> str:
    """Reshape an arbitrary cluster token into a kubeadm bootstrap token.

    The last six hex characters of the SHA-256 digest become the token id and
    the first sixteen the token secret.
    """
    digest = _sha256_hex(cluster_token.encode("utf-8"))
    return f"{digest[-6:]}.{digest[:16]}"


def split_bootstrap_token(token: str) -> Tuple[str, str]:
    """Split a bootstrap token into its id and secret.

    Raises:
        InvalidBootstrapTokenError: If the token is not in bootstrap token form
    """
    match = BOOTSTRAP_TOKEN_PATTERN.match(token or "")
    if not match:
        raise InvalidBootstrapTokenError(token or "")
    return match.group(1), match.group(2)


def get_cert_sans_revision(cert_sans: List[str]) -> str:
    """Return an opaque revision of the API server certificate SANs."""
    # Match the compact JSON encoding used by the reconfigure helper
    encoded = json.dumps(
        list(cert_sans) if cert_sans is not None else None,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    for char, escaped in JSON_HTML_ESCAPES.items():
        encoded = encoded.replace(char, escaped)
    return _sha256_hex(encoded.encode("utf-8"))
