"""
Device Presets Configuration for SiteCraft

Viewport sizes used when rendering a preview of generated code for the
desktop, tablet and mobile device switcher.
"""

from typing import Dict, List, TypedDict


class DevicePreset(TypedDict):
    """Type definition for a device preset."""
    width: int
    height: int
    label: str


DEVICE_PRESETS: Dict[str, DevicePreset] = {
    "desktop": {
        "width": 1280,
        "height": 800,
        "label": "Desktop"
    },
    "tablet": {
        "width": 768,
        "height": 1024,
        "label": "Tablet"
    },
    "mobile": {
        "width": 375,
        "height": 812,
        "label": "Mobile"
    },
}

# Default device to use when none is specified
DEFAULT_DEVICE = "desktop"


def get_device_viewport(device: str) -> DevicePreset:
    """
    Get the viewport for a given device name.

    Args:
        device: The name of the device to look up

    Returns:
        DevicePreset containing width, height, and label

    Raises:
        KeyError: If the device name is not found
    """
    if device not in DEVICE_PRESETS:
        raise KeyError(f"Device '{device}' not found. Available devices: {list(DEVICE_PRESETS.keys())}")

    return DEVICE_PRESETS[device]


def validate_device_name(device: str) -> bool:
    """Check if a device name is valid."""
    return device in DEVICE_PRESETS


def get_device_info_for_frontend() -> List[Dict[str, object]]:
    """Get device information formatted for the frontend switcher."""
    return [
        {"name": name, "label": preset["label"], "width": preset["width"], "height": preset["height"]}
        for name, preset in DEVICE_PRESETS.items()
    ]
