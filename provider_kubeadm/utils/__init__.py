"""Utility functions and helpers for the kubeadm cluster provider."""
import posixpath
from typing import Any

from ..config import Config


def redact_sensitive_data(data: Any) -> Any:
    """Recursively redact sensitive data from dictionaries and lists.

    Args:
        data: Input data that might contain sensitive information

    Returns:
        Data with sensitive values redacted
    """
    if isinstance(data, dict):
        return {
            k: "[REDACTED]" if any(
                redact_key in str(k).lower().replace("_", "")
                for redact_key in Config.REDACT_KEYS
            ) else redact_sensitive_data(v)
            for k, v in data.items()
        }
    elif isinstance(data, (list, tuple)):
        return [redact_sensitive_data(item) for item in data]
    return data


def root_join(root_path: str, *parts: str) -> str:
    """Join path parts below the cluster root path.

    Args:
        root_path: Absolute cluster root path ("/" in appliance mode)
        *parts: Relative path parts

    Returns:
        str: Absolute path
    """
    return posixpath.join(root_path or "/", *parts)


def get_mapping(obj: Any, key: str) -> dict:
    """Return ``obj[key]`` when it is a mapping, an empty mapping otherwise.

    User supplied configuration is read through this so that a field of the
    wrong type counts as unset.
    """
    value = obj.get(key) if isinstance(obj, dict) else None
    return value if isinstance(value, dict) else {}


def get_list(obj: Any, key: str) -> list:
    """Return ``obj[key]`` when it is a list, an empty list otherwise."""
    value = obj.get(key) if isinstance(obj, dict) else None
    return value if isinstance(value, list) else []


def get_string(obj: Any, key: str) -> str:
    """Return ``obj[key]`` when it is a string, an empty string otherwise."""
    value = obj.get(key) if isinstance(obj, dict) else None
    return value if isinstance(value, str) else ""
