"""Padding of response data to a fixed block size."""

from __future__ import annotations

import dataclasses

from .platform import HandleResponse

BLOCK_SIZE = 256


def space_pad(block_size: int, message: bytes) -> bytes:
    """Pad ``message`` with spaces up to a multiple of ``block_size``."""
    if block_size <= 0:
        raise ValueError("block_size must be positive")
    surplus = len(message) % block_size
    if surplus == 0:
        return bytes(message)
    return bytes(message) + b" " * (block_size - surplus)


def pad_response(response: HandleResponse, block_size: int = BLOCK_SIZE) -> HandleResponse:
    """Return the response with its data, if any, padded to ``block_size``."""
    if response.data is None:
        return response
    return dataclasses.replace(response, data=space_pad(block_size, response.data))