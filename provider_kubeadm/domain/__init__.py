"""Cluster context, kubeadm configuration set and shared constants."""
