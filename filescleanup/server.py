#!/usr/bin/env python3
"""
MCP tool server exposing the scanner as ``find-useless-files``

Requires the ``server`` extra (fastmcp). Speaks MCP over stdio, so all
logging goes to stderr.
"""

import logging
import sys

from fastmcp import FastMCP

from filescleanup import __version__
from filescleanup.core.config import DEFAULT_MAX_DEPTH, DEFAULT_MAX_FILES
from filescleanup.core.scanner import find_useless_files

logger = logging.getLogger(__name__)

mcp = FastMCP(name="files-cleanup")


@mcp.tool(name="find-useless-files")
def find_useless_files_tool(directory: str, maxDepth: int = DEFAULT_MAX_DEPTH,
                            maxFiles: int = DEFAULT_MAX_FILES) -> dict:
    """Find useless files in a directory.

    maxDepth is capped at 10 and maxFiles at 1000.
    """
    logger.info(f"files-cleanup v{__version__} find-useless-files: {directory} (maxDepth={maxDepth}, maxFiles={maxFiles})")
    return find_useless_files(directory, maxDepth, maxFiles)


def main():
    logging.basicConfig(
        level=logging.INFO,
        format='[%(asctime)s] %(levelname)s: %(message)s',
        datefmt='%H:%M:%S',
        stream=sys.stderr
    )
    mcp.run()


if __name__ == "__main__":
    main()
