"""Startup connectivity check for the Milvus server."""

import logging

from pymilvus import connections, utility

from recall_agent.config import milvus

logger = logging.getLogger(__name__)


def validate_connection() -> str:
    """Connect to Milvus and return its server version; raises when unreachable."""
    connections.connect(alias="default", uri=milvus.MILVUS_URI)
    version = utility.get_server_version()
    logger.info("Connected to Milvus %s at %s", version, milvus.MILVUS_URI)
    return version
