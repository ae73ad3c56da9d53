"""FastAPI main application for the bridge game backend"""

import logging
import os

from .rules import create_rules
from .ws.server import create_app

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

rules = create_rules(trick_display_delay=float(os.getenv("TRICK_DELAY", "1.5")))
app = create_app(rules)


@app.get("/")
async def root():
    return {"message": "Bridge Game API", "version": "1.0.0"}
