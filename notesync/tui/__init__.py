# SPDX-License-Identifier: MIT
"""Textual host for notesync."""
