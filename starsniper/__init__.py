"""Telegram Stars sniper bot: interactive setup and launch shell."""

__version__ = "0.1.0"
