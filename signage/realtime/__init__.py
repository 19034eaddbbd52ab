"""In-process change notification for table mutations."""

from signage.realtime.change_feed import ChangeEvent, ChangeFeed, Subscription, get_change_feed

__all__ = ["ChangeEvent", "ChangeFeed", "Subscription", "get_change_feed"]
