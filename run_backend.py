#!/usr/bin/env python
"""Script to run the Task Manager API server."""
import os
import sys
from pathlib import Path

# Make the task_api package importable when run from anywhere
script_dir = Path(__file__).resolve().parent
sys.path.insert(0, str(script_dir))
os.chdir(script_dir)

import uvicorn

from task_api.config import Settings
from task_api.main import configure_logging

if __name__ == "__main__":
    configure_logging(Settings.from_env().log_level)
    uvicorn.run(
        "task_api.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
