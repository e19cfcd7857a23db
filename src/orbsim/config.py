"""Environment-driven settings for orbsim."""

import os
from pathlib import Path
from typing import Optional

# Logging settings
LOG_LEVEL = os.getenv("ORBSIM_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("ORBSIM_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
LOG_FILE: Optional[Path] = Path(os.environ["ORBSIM_LOG_FILE"]) if os.getenv("ORBSIM_LOG_FILE") else None

# Web settings
WEB_HOST = os.getenv("ORBSIM_HOST", "0.0.0.0")
WEB_PORT = int(os.getenv("ORBSIM_PORT", "8080"))

# Simulation settings
FORCE_LAW = os.getenv("ORBSIM_FORCE_LAW", "inverse_square")
SIMULATION_DT = float(os.getenv("ORBSIM_DT", "0.01"))
BROADCAST_PERIOD = float(os.getenv("ORBSIM_BROADCAST_PERIOD_MS", "16")) / 1000.0

__all__ = [
    "LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FILE",
    "WEB_HOST",
    "WEB_PORT",
    "FORCE_LAW",
    "SIMULATION_DT",
    "BROADCAST_PERIOD",
]
