"""kubegen - Kubernetes manifests from a handful of deployment facts."""

__version__ = "0.3.0"
