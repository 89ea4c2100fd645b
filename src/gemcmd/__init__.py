# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.01.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/__init__.py

"""gemcmd - manage custom command snippets stored one file per command."""

__version__ = "0.3.0"
