"""Kubeadm cluster provider plugin."""

__version__ = "0.1.0"
