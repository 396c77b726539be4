# Shared services
from rebrick.services.debug_logger import init_logging, get_logger, log_exception, log_request
from rebrick.services.cache_manager import TTLCache, get_cache
