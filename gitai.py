#!/usr/bin/env python
"""
Thin wrapper script to invoke the git_ai CLI.

Running ``python gitai.py`` is equivalent to running the ``git-ai``
console script installed via ``pyproject.toml``.
"""

from git_ai.cli import main


if __name__ == "__main__":
    main(prog_name="git-ai")
