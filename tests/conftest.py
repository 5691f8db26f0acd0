"""Pytest configuration: ensure env vars and import path are set early.

This runs before any tests, so modules can import without local path hacks.
Also load .env before setting defaults so local overrides are honored.
"""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

from dotenv import load_dotenv

# Ensure repository root is on sys.path for local package imports
sys.path.append(str(Path(__file__).resolve().parents[1]))

load_dotenv(override=False)

# Keep test logs out of the working tree
os.environ.setdefault("SKILL_ENGINE_LOG_DIR", tempfile.mkdtemp(prefix="skill-engine-logs-"))
os.environ.setdefault("LOG_PSEUDONYM_SECRET", "test-secret")
