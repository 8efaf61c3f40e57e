"""
Elasticsearch connection management.
"""

from typing import Optional

from elasticsearch import Elasticsearch
from loguru import logger

from config.environments import get_elasticsearch_config


def get_elasticsearch_client(environment: Optional[str] = None) -> Elasticsearch:
    """
    Create an Elasticsearch client for the configured cluster.

    Args:
        environment: Environment name (uses current if not specified)

    Returns:
        Configured Elasticsearch client
    """
    config = get_elasticsearch_config(environment)

    params = {
        "hosts": [config["url"]],
        "request_timeout": config["timeout_ms"] / 1000.0,
        "verify_certs": config.get("verify_certs", True),
    }

    if config.get("ca_certs"):
        params["ca_certs"] = config["ca_certs"]

    if config.get("api_key"):
        params["api_key"] = config["api_key"]
    elif config.get("username") and config.get("password"):
        params["basic_auth"] = (config["username"], config["password"])

    logger.debug("Connecting to Elasticsearch at {}", config["url"])
    return Elasticsearch(**params)


def ping_cluster(environment: Optional[str] = None) -> bool:
    """
    Check Elasticsearch connectivity using a low-privilege operation.

    Args:
        environment: Environment name (uses current if not specified)

    Returns:
        True if connection successful
    """
    try:
        es = get_elasticsearch_client(environment)

        # A size-0 search only needs read privileges, unlike ping()
        response = es.search(
            index="*",
            size=0,
            query={"match_all": {}},
            timeout="5s"
        )
        return "hits" in response

    except Exception as e:
        logger.warning("Elasticsearch search check failed: {}", e)
        try:
            es = get_elasticsearch_client(environment)
            response = es.count(index="*")
            return "count" in response
        except Exception as e:
            logger.warning("Elasticsearch count check failed: {}", e)
            return False
