# SPDX-License-Identifier: MIT
"""Core link-argument model, token classification and backend selection."""
