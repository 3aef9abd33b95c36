"""
Greengrass Log Manager 入口
"""

import sys

from greengrass_logmanager.cli import main

if __name__ == "__main__":
    sys.exit(main())
