"""OS package manager adapters."""

from provisioner.adapters.packages.apk import ApkPackageManager
from provisioner.adapters.packages.apt import AptPackageManager
from provisioner.adapters.packages.base import PackageManager
from provisioner.adapters.packages.registry import PACKAGE_MANAGERS, detect_package_manager

__all__ = [
    "PACKAGE_MANAGERS",
    "ApkPackageManager",
    "AptPackageManager",
    "PackageManager",
    "detect_package_manager",
]
