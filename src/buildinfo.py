"""
Build information, written by the packaging step.

DEV_BUILD enables development-only hooks (wallet auto-wipe on start,
debug full wipe). Release builds ship this file with DEV_BUILD = False.
It is never read from settings or the environment.
"""

VERSION = "0.1.0"
DEV_BUILD = False
