from .subscribers import SubscriberStore, SubscriberStoreError

__all__ = ["SubscriberStore", "SubscriberStoreError"]
