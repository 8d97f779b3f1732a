"""Notification domain types."""

from .exceptions import (
    ChannelConfigurationError,
    ChannelDeliveryError,
    ChannelDisabledError,
    ChannelUnavailableError,
    NotificationError,
    UnknownChannelError,
)
from .models import ChannelDescriptor, DeliveryOutcome, NotificationRecord, Recipient

__all__ = [
    "ChannelConfigurationError",
    "ChannelDeliveryError",
    "ChannelDescriptor",
    "ChannelDisabledError",
    "ChannelUnavailableError",
    "DeliveryOutcome",
    "NotificationError",
    "NotificationRecord",
    "Recipient",
    "UnknownChannelError",
]
