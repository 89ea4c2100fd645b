# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.01.08
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/data/__init__.py

"""Command names, path confinement and the on-disk record format."""
