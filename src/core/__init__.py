"""Core domain package for gatekeeper.

Core contains the moderation decisions, the whitelist, pattern matching and
the retry/scheduling helpers without any Telegram-specific code, so the
pipeline can be driven by fakes in tests.
"""
