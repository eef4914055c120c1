"""
Default exclusion patterns, applied whenever a pattern filter is active.

These patterns use gitignore syntax. Directory patterns end with `/`.
"""

from __future__ import annotations

DEFAULT_EXCLUDES: list[str] = [
    # Version control
    ".git/",
    ".gitignore",
    ".gitattributes",
    ".gitmodules",
    ".hg/",
    ".hgignore",
    ".hgsub",
    ".hgsubstate",
    ".hgtags",
    ".svn/",
    ".bzr/",
    ".bzrignore",
    "_darcs/",
    ".darcsrepo/",
    "CVS/",
    ".cvsignore",
    "RCS/",
    "SCCS/",
    "vssver.scc",
    ".arch-ids/",
    "{arch}/",
    # Editor and OS leftovers
    "*~",
    r"\#*#",
    ".#*",
    "%*%",
    "._*",
    ".DS_Store",
    ".idea/",
    ".vscode/",
    # Build output
    "target/",
    "build/",
    "dist/",
    "node_modules/",
    "__pycache__/",
]
