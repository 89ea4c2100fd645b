# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.01.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/core/__init__.py

"""Command-store operations: enumeration, mutation, backup, merge and JSON interchange."""
