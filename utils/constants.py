# utils/constants.py

# --- Result Directories ---
FINAL_MODEL_DIR = "01_FinalModel"          # Serialized winner + metadata
REPORTING_DIR = "02_ComparisonReports"     # Ledger / settings snapshots

# --- File Names ---
FINAL_MODEL_FILE = "final_model.aml"
TRAINING_METADATA_FILE = "training_metadata.json"
COMPARISON_TABLE_FILE = "comparison.csv"
SETTINGS_TABLE_FILE = "settings.csv"
RUN_SUMMARY_FILE = "run_summary.csv"

# --- Final Model Blob Layout ---
# magic | version | family | sub-kind | n_features | sha256(payload) | payload length
MODEL_MAGIC = b"AMLM"
MODEL_FORMAT_VERSION = 1
SUPPORTED_MODEL_FORMAT_VERSIONS = (1,)
MODEL_HEADER_FORMAT = ">4sHBBI32sQ"
MODEL_PAYLOAD_COMPRESSION = 3

# --- Defaults ---
DEFAULT_NUMBER_OF_FOLDS = 10
DEFAULT_SHUFFLE_SEED = 0

# Integer-valued targets with at most this many distinct values are treated
# as classification when no task kind is set explicitly.
MAX_INFERRED_CLASSES = 20

# --- Logging ---
LOG_DIR = "logs"
LOG_FILE = "automl.log"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5
LOGGER_NAMESPACE = "automl"
