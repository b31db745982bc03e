# Copyright 2026 DjangoBuilder Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the DjangoBuilder schema model documentation."""

project = "DjangoBuilder"
author = "DjangoBuilder Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
