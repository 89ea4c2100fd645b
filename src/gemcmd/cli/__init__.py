# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.05.10
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/cli/__init__.py

from .main import app, cli_main as main

__all__ = ["app", "main"]
