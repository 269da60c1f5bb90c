"""Factory Boy helpers producing request payloads for the API."""

from __future__ import annotations
