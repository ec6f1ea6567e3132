import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DEBUG_EXECUTION = _env_flag("PERMUTE_DEBUG")
DEBUG_DETAILED = False

# Reporting filters (read once per process, copied into HarnessOptions)
OMIT_COUT = _env_flag("PERMUTE_OMIT_COUT")
OMIT_SKIPPED = _env_flag("PERMUTE_OMIT_SKIPPED")
OMIT_FAILED = _env_flag("PERMUTE_OMIT_FAILED")
OMIT_PASSED = _env_flag("PERMUTE_OMIT_PASSED")
OUTPUT_FILE = os.environ.get("PERMUTE_OUTPUT_FILE") or None

# Dump tensor A/B elements after the captured log
PRINT_ELEMENTS = _env_flag("PERMUTE_PRINT_ELEMENTS")

# Seed for the random fill of tensor A
RANDOM_SEED = int(os.environ.get("PERMUTE_SEED", "0"))

# Backend name used when no engine is requested explicitly (None = auto)
DEFAULT_BACKEND = os.environ.get("PERMUTE_BACKEND") or None

# Comparator: max relative error must stay below TOLERANCE * eps(dtype)
TOLERANCE = 10.0

# Fraction of the device (or host) memory a single case may use
MEMORY_FRACTION = 0.5
