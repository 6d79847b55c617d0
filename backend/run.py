#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Creates the tables on the configured database, then serves the API with
auto-reload. Pass --seed to add the demo users first.
"""
import argparse
import os
from pathlib import Path
import sys

backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn  # noqa: E402

from skillswap.core.config import settings  # noqa: E402
from skillswap.database import SessionLocal  # noqa: E402
from skillswap.init_db import create_tables, seed_demo_users  # noqa: E402

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run the SkillSwap API locally")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--seed", action="store_true", help="add demo users before starting")
    args = parser.parse_args()

    create_tables()
    if args.seed:
        db = SessionLocal()
        try:
            seed_demo_users(db)
        finally:
            db.close()

    print(f"Starting SkillSwap API ({settings.environment}) at http://localhost:{args.port}")
    print(f"API Docs: http://localhost:{args.port}/docs")

    uvicorn.run(
        "skillswap.main:app",
        host="0.0.0.0",
        port=args.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
