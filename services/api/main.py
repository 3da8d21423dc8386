from __future__ import annotations

import logging
import os
from pathlib import Path

from experience_engine.http_app import create_app
from experience_engine.loader import load_experience
from experience_engine.logging_config import setup_logging

# Environment configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
PROJECT_ID = os.getenv("PROJECT_ID")
EXPERIENCE_PATH = os.getenv("EXPERIENCE_PATH")

# Setup logging
setup_logging(environment=ENVIRONMENT, project_id=PROJECT_ID)
logger = logging.getLogger(__name__)

# An invalid experience file stops startup rather than serving a broken document
experience = load_experience(Path(EXPERIENCE_PATH)) if EXPERIENCE_PATH else None
if experience is not None:
    logger.info(f"Serving experience {experience.id} from {EXPERIENCE_PATH}")

app = create_app(experience=experience)
