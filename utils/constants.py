import json
from config.paths import CONSTANTS_PATH

"""
Loads configuration constants from config/constants.json and exposes them as module-level variables.
Edit constants.json to change values; import from utils.constants to use in code.
"""

with open(CONSTANTS_PATH, "r", encoding="utf-8") as f:
    _constants = json.load(f)

# Expose constants as variables
ENTITY_TYPES = tuple(_constants["ENTITY_TYPES"])
REQUIRED_COLUMNS = _constants["REQUIRED_COLUMNS"]
FIELD_ALIASES = _constants["FIELD_ALIASES"]

PRIORITY_MIN = _constants["PRIORITY_MIN"]
PRIORITY_MAX = _constants["PRIORITY_MAX"]
MIN_DURATION = _constants["MIN_DURATION"]
MIN_PHASE = _constants["MIN_PHASE"]
MAX_PHASE_RANGE = _constants["MAX_PHASE_RANGE"]

RULES_EXPORT_VERSION = _constants["RULES_EXPORT_VERSION"]

FIX_SERVICE_TIMEOUT = _constants["FIX_SERVICE_TIMEOUT"]
