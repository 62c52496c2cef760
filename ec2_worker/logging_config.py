"""
Custom logging configuration to quiet AWS SDK chatter
"""

import logging
import logging.config
from typing import Any, Dict


class CredentialDiscoveryFilter(logging.Filter):
    """Filter to suppress botocore credential discovery logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out 'Found credentials in ...' lines from botocore."""
        if record.name.startswith("botocore.credentials"):
            if record.getMessage().startswith("Found credentials"):
                return False
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration for the worker."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "credential_discovery_filter": {
                "()": CredentialDiscoveryFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout"
            },
            "aws": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["credential_discovery_filter"]
            }
        },
        "loggers": {
            "ec2_worker": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            },
            "botocore": {
                "handlers": ["aws"],
                "level": level,
                "propagate": False
            },
            "boto3": {
                "handlers": ["aws"],
                "level": level,
                "propagate": False
            },
            "urllib3": {
                "handlers": ["default"],
                "level": "WARNING",
                "propagate": False
            }
        },
        "root": {
            "level": "WARNING",
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the worker logging configuration."""
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logging.config.dictConfig(get_logging_config(level))
