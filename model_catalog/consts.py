from pathlib import Path

DEFAULT_DATA_DIR = (Path(__file__).parent.parent.resolve() / "data").absolute().resolve()

# Model normalization
NEW_MODEL_DAYS = 30  # Models released within this window are flagged as new
UNKNOWN_PROVIDER = "Unknown"  # Sentinel for records without a usable id and name
UNKNOWN_NAME = "Unknown"

# Source endpoints
MODELS_DEV_URL = "https://models.dev/api.json"
OPENROUTER_URL = "https://openrouter.ai/api/v1/models"
HUGGINGFACE_URL = "https://huggingface.co/api/models"
HUGGINGFACE_PARAMS = {"limit": 100, "sort": "downloads", "direction": -1}
ARTIFICIAL_ANALYSIS_URL = "https://artificialanalysis.ai/api/datasets/96.csv"

# HTTP fetching
SOURCE_TIMEOUT_SECONDS = 30.0
SOURCE_MAX_RETRIES = 3
SOURCE_RETRY_DELAY_MS = 1000  # Overridden by API_RETRY_MS
SOURCE_MAX_RETRY_DELAY = 30.0

# Source presets accepted by --source and MODEL_CATALOG_SOURCES
SOURCE_PRESETS = {
    "all": ["models.dev", "openrouter", "huggingface", "artificialanalysis"],
    "default": ["models.dev"],
    "registries": ["models.dev", "openrouter"],
}

# Filter evaluation
CLAUSE_RATIONALE_SEPARATOR = "; "
ALL_CRITERIA_PASSED = "All criteria passed"
NO_MATCHING_CRITERIA = "No matching criteria"
