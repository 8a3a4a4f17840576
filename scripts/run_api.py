#!/usr/bin/env python
"""
Run the Quote Tool HTTP API under uvicorn.

Usage:
    python scripts/run_api.py

Environment:
    PORT                 listen port (default 8000)
    QUOTE_TOOL_DATA_DIR  where rate_cards.json / quotes.json live
"""
import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))

from quote_tool.config.settings import get_settings
from quote_tool.data.seed_schedules import seed_schedules


def main():
    settings = get_settings()
    if not settings.schedules_path.exists():
        print(f"No rate card store at {settings.schedules_path}; seeding defaults...")
        seed_schedules(settings)

    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)

    port = env.get("PORT", "8000")
    print(f"Starting Quote Tool API (FastAPI) on 0.0.0.0:{port}...")
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "quote_tool.api.main:app",
            "--host", "0.0.0.0",
            "--port", port,
            "--reload"
        ], env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
