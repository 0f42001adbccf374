"""blob-indexer Launch Script (Default).

Forwards to ``blob_launcher.cli`` with the artifacts and logs/ rooted next to
this file, so it behaves the same from any working directory.

Usage:
    python launch.py start debug
    python launch.py start release foreground
    python launch.py run release
    python launch.py build debug
"""

import sys
from pathlib import Path

if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent))
    from blob_launcher.cli import main

    sys.exit(main(["--root", str(Path(__file__).parent), *sys.argv[1:]]))
