# Expose main components for easy access
from .ir.dtypes import DType, Backend
from .harness.params import PermutationParams, decode_params
from .harness.lifecycle import PermutationTest, CaseOutcome, CaseStatus
from .harness.options import HarnessOptions
