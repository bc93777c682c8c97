"""Data model, configuration and dictionary-based object helpers for a Kubernetes cluster scaling advisor."""

__version__ = "0.1.0"