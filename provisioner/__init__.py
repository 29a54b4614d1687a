"""Airnity provisioner — prepare container images and CI runners."""

__version__ = "0.1.0"
