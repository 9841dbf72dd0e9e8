# SPDX-License-Identifier: MIT
"""Command-line entry point for the module cache.

The console script targets :func:`warmstart.cli.main.main`.
"""
