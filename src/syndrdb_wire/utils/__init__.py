"""Shared helpers for the codec."""

from .buffer_pool import BufferPool
