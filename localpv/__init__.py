"""Local persistent volume provisioning: environment settings, volume configuration, claim validation, helper-pod commands and deployment rollout status."""

__version__ = "0.1.0"
__all__ = ["deployment", "env", "helper_pod", "provisioner", "rollout", "volume_config"]