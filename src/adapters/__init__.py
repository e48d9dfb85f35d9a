"""Telegram adapters that connect the core pipeline to Telethon."""
