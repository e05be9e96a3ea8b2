# Observability module
from closet_ai.observability.logger import log_generation, is_logging_enabled
from closet_ai.observability.metrics import (
    record_generation,
    get_metrics,
    reset_metrics,
)
