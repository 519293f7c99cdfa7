"""Configuration management for the kubeadm cluster provider."""
import logging
import os

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Provider configuration with sensible defaults."""

    # Logging
    LOG_LEVEL: str = os.getenv("PROVIDER_KUBEADM_LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv(
        "PROVIDER_KUBEADM_LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    LOG_FILE: str = os.getenv("PROVIDER_KUBEADM_LOG_FILE", "/var/log/provider-kubeadm.log")

    # Bootstrap tool
    KUBEADM_BINARY: str = os.getenv("PROVIDER_KUBEADM_KUBEADM_BINARY", "kubeadm")

    # Security
    REDACT_KEYS: tuple = ("token", "secret", "password", "certificatekey")

    @classmethod
    def validate(cls) -> None:
        """Validate the logging configuration."""
        if not cls.LOG_FILE:
            raise ValueError("PROVIDER_KUBEADM_LOG_FILE must not be empty")
        if not isinstance(logging.getLevelName(cls.LOG_LEVEL), int):
            raise ValueError(f"Unknown log level: {cls.LOG_LEVEL}")
