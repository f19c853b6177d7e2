"""Data models for headers, messages, and device entries."""

from .device import DeviceEntry, DEVICE_NAME_MAX, DEVICES_MAX
from .message import Header, Message
