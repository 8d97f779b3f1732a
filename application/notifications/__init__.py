from .channels import Channel, describe_channel
from .orchestrator import NotificationOrchestrator, SettingsProvider
from .registry import ChannelFactory, ChannelRegistry
from .store import NotificationStore, create_in_app_notification

__all__ = [
    "Channel",
    "ChannelFactory",
    "ChannelRegistry",
    "NotificationOrchestrator",
    "NotificationStore",
    "SettingsProvider",
    "create_in_app_notification",
    "describe_channel",
]
