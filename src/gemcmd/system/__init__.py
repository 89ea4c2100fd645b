# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.01.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/system/__init__.py

"""System-level support: exceptions, logging setup, console display."""
