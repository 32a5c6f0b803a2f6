# synastry_app/version.py
from __future__ import annotations
import os

# Bumped here; CI/preview builds may override through the environment
VERSION = os.getenv("SYNASTRY_VERSION", "0.1.0")
