"""blob_launcher -- build and launch the blob-indexer binary.

Resolves a build profile to a prebuilt artifact, provisions the log
directory, and starts the artifact attached (foreground) or detached
(background) with its output appended to ``logs/indexer.log``.
"""

from blob_launcher.launcher import Launcher
