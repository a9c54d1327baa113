# Flagtree CLI Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global logger instance for Flagtree."""
import logging

logger: logging.Logger = logging.getLogger("flagtree")
