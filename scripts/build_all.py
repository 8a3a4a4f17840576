#!/usr/bin/env python
"""
Build pipeline - seeds the rate card store and runs the test suite.

Usage:
    python scripts/build_all.py
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from quote_tool.data.seed_schedules import seed_schedules


def main():
    print("=" * 60)
    print("QUOTE TOOL BUILD PIPELINE")
    print("=" * 60)
    print()

    # Seed rate cards
    print("[1/2] Seeding rate cards...")
    report = seed_schedules(verbose=True)

    if report["status"] != "success":
        print("\n❌ BUILD FAILED")
        for error in report["errors"]:
            print(f"  ERROR: {error}")
        sys.exit(1)

    print()
    print("[2/2] Running tests...")

    # Run tests
    import subprocess
    test_result = subprocess.run(
        [sys.executable, '-m', 'pytest', 'tests', '-v', '--tb=short'],
        cwd=Path(__file__).parent.parent
    )

    if test_result.returncode != 0:
        print("\n❌ TESTS FAILED")
        sys.exit(1)

    print()
    print("=" * 60)
    print("✅ BUILD COMPLETE")
    print("=" * 60)
    print()
    print("Summary:")
    print(f"  Rate cards seeded: {report['seeded']}")
    print(f"  Store: {report['store']}")
    for warning in report["warnings"]:
        print(f"  WARNING: {warning}")


if __name__ == "__main__":
    main()
