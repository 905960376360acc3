#!/usr/bin/env python3
# provision_server.py
# -*- coding: utf-8 -*-
"""
Provision this server. Run with `python3 provision_server.py --help`.
"""

from provisioner.main_installer import run

if __name__ == "__main__":
    run()
