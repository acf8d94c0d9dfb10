"""
A customizable, Git-aware shell prompt

``loco-pilot`` prints a prompt string for Bash's (or zsh's) ``PS1`` variable.
The prompt shows your username, hostname, the current directory (abbreviated
if it gets too long), the time, and the status of the current Git repository,
in one of several styles with colors you can configure.

Features:

- Four prompt styles: ``default``, ``info``, ``emoji``, and ``minimal``
- Per-field colors, stored in a TOML file in your config directory
- Shows the current Git branch, whether the working tree is dirty, and how
  far the branch is ahead of/behind its upstream
- Runs a single ``git status`` per prompt and caches results briefly
- Can list local branches and print the one you pick, for easy copying
"""

__version__ = "0.1.0"
__author__ = "Aasish Sudarsanan"
__license__ = "MIT"
