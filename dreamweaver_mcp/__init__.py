# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Dreamweaver
A dream journal that breaks dreams into analyzed fragments and reflects them
back as dashboards, badges, and a relationship graph.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dreamweaver")
except PackageNotFoundError:
    __version__ = "0.1.0"
