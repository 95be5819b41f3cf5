"""Announcement codec module."""

from .codec import decode, decode_announcement, is_content_id

__all__ = ["decode", "decode_announcement", "is_content_id"]
