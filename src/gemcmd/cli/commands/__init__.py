# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/gemcmd/cli/commands/__init__.py

"""
Command handlers for gemcmd CLI operations.

This package contains the business logic for all CLI commands,
separated from the CLI interface layer. Commands are organized by type:

- info: Read-only commands (list, show, validate-config)
- actions: State-changing commands (add, edit, delete, rename, backup,
  restore, export, import, open)
"""
