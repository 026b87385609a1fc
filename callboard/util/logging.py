"""
Structured logging for model, store and request operations.
"""

import logging
from typing import Any, Dict, List


class StructuredLogger:
    """Structured logger for entity, store and HTTP request operations."""

    def __init__(self, name: str = "callboard"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status == "failed":
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_model_operation(self, model: str, operation: str, record_id: Any = None,
                            status: str = "success", details: Dict[str, Any] = None):
        """Log an operation on an entity of the given model."""
        log_details = {"record_id": record_id}
        if details:
            log_details.update(details)

        self.log_operation(f"{model}.{operation}", status, log_details)

    def log_store_operation(self, operation: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a database operation such as load, save or autosave."""
        self.log_operation(f"store.{operation}", status, details)

    def log_request(self, timestamp: str, host: str, method: str, url: str, body: Any = None):
        """Log an incoming HTTP request in a single line."""
        message = f"[{timestamp}] [{host}] {method} '{url}'"
        if body is not None and not isinstance(body, dict):
            message += f" - {sanitize_payload(body)}"

        self.logger.info(message)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def sanitize_payload(payload: Any, max_length: int = 100) -> Any:
    """Truncate long strings inside a payload before it is logged."""
    if isinstance(payload, dict):
        return {k: sanitize_payload(v, max_length) for k, v in payload.items()}
    elif isinstance(payload, str):
        return payload[:max_length] + "..." if len(payload) > max_length else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, max_length) for item in payload]
    else:
        return payload


def summarize_errors(errors: Dict[str, List[str]]) -> Dict[str, int]:
    """Reduce a field->messages mapping to field->count for log lines."""
    return {field: len(messages) for field, messages in (errors or {}).items()}
