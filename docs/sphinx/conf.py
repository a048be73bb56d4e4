# Copyright 2026 ScriptBind Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for scriptbind documentation."""

project = "scriptbind"
author = "ScriptBind Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]

html_theme = "alabaster"
