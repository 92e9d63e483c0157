"""Implementation modules behind ``chat_adapter.base.cancellation``."""
