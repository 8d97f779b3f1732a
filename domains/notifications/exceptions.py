"""Notification delivery exceptions."""


class NotificationError(RuntimeError):
    pass


class UnknownChannelError(NotificationError):
    def __init__(self, channel_id: str) -> None:
        super().__init__(f"Unknown channel: {channel_id}")
        self.channel_id = channel_id


class ChannelDisabledError(NotificationError):
    def __init__(self, channel_id: str) -> None:
        super().__init__(f"Channel is not enabled: {channel_id}")
        self.channel_id = channel_id


class ChannelUnavailableError(NotificationError):
    def __init__(self, channel_id: str) -> None:
        super().__init__(f"Channel is not available to users: {channel_id}")
        self.channel_id = channel_id


class ChannelConfigurationError(NotificationError):
    """A handler is missing global credentials or per-recipient settings."""


class ChannelDeliveryError(NotificationError):
    """The transport rejected or failed the delivery."""
