# SPDX-License-Identifier: MIT
"""Single source of truth for the notesync version."""

__version__ = "0.4.0"
