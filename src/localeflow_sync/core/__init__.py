"""Remote translation store access."""

from .client import LocaleflowClient, RemoteStore, RemoteTranslations

__all__ = ["LocaleflowClient", "RemoteStore", "RemoteTranslations"]
