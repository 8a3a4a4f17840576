#!/usr/bin/env python
"""
Run the Streamlit quote calculator and harmonization UI.

Usage:
    python scripts/run_app.py
"""
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / 'src'))

from quote_tool.config.settings import get_settings
from quote_tool.data.seed_schedules import seed_schedules


def main():
    ui_path = project_root / 'src' / 'quote_tool' / 'ui' / 'app_streamlit.py'
    if not ui_path.exists():
        print(f"ERROR: UI module not found at {ui_path}")
        sys.exit(1)

    settings = get_settings()
    if not settings.schedules_path.exists():
        report = seed_schedules(settings)
        if report["status"] != "success":
            for error in report["errors"]:
                print(f"ERROR: {error}")
            sys.exit(1)

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path)]
    print(f"Starting Streamlit: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nApplication stopped.")


if __name__ == "__main__":
    main()
