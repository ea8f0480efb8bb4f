"""CLI package.

The ``cli`` sub-package contains the Click application and its command
implementations.  Commands only orchestrate; resolution and rendering
live in the parent package.
"""
from __future__ import annotations
