# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Editor tooling support for Cordova and Ionic projects."""

from __future__ import annotations

__version__ = "0.4.0"

__all__ = ["__version__"]
