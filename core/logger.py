"""
Configure the logger
"""

import logging
from core.config import get_settings

logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("file_index")

# opensearch-py logs every failed request on its own, keep it to warnings
logging.getLogger("opensearch").setLevel(logging.WARNING)
