"""Device capability detection from client hints."""

import re

from medads.experience.models import DeviceCapabilities

MOBILE_USER_AGENT = re.compile(
    r"Android|webOS|iPhone|iPad|iPod|BlackBerry|IEMobile|Opera Mini", re.IGNORECASE
)


def detect_device_capabilities(
    user_agent: str | None = None,
    device_memory_gb: float | None = None,
    hardware_concurrency: int | None = None,
) -> DeviceCapabilities:
    """Infer device capabilities; without hints both flags are false."""
    is_mobile = bool(user_agent and MOBILE_USER_AGENT.search(user_agent))
    is_high_performance = (device_memory_gb or 0) > 4 or (hardware_concurrency or 0) > 4
    return DeviceCapabilities(is_high_performance=is_high_performance, is_mobile=is_mobile)
