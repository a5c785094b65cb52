"""LocaleFlow translation sync: keep local translation files and the
remote translation store consistent."""

__version__ = "0.4.0"
