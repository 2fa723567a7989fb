# SPDX-License-Identifier: MIT
"""Platform detection, build settings and the project manifest."""
