# !/usr/bin/env python3
# filename: vps-setup/install.py
# -*- coding: utf-8 -*-
"""
Entry point for running the installer from a checkout.
"""

import sys

from vps_setup.main import main

if __name__ == "__main__":
    sys.exit(main())
