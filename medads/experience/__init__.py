"""Experience selection module."""

from .device import detect_device_capabilities
from .models import (
    DeviceCapabilities,
    ExperienceConfig,
    ExperienceContext,
    ExperienceSelection,
    ExperienceType,
)
from .selector import (
    TRANSITION_DURATION_MS,
    ExperienceSelector,
    generate_experience_options,
)

__all__ = [
    "TRANSITION_DURATION_MS",
    "DeviceCapabilities",
    "ExperienceConfig",
    "ExperienceContext",
    "ExperienceSelection",
    "ExperienceSelector",
    "ExperienceType",
    "detect_device_capabilities",
    "generate_experience_options",
]
