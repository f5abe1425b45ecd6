"""Custom filters for uvicorn access logging."""

import logging

from signaling.settings import app_settings


class ExcludePathsFilter(logging.Filter):
    """
    Logging filter to exclude monitoring endpoint requests from access logs.

    Health checks and Prometheus scraping would otherwise flood the access
    log. The excluded paths come from the LOG_EXCLUDED_PATHS setting.
    """

    def __init__(self, excluded_paths: list[str] | None = None) -> None:
        super().__init__()
        self.excluded_paths = (
            excluded_paths
            if excluded_paths is not None
            else app_settings.LOG_EXCLUDED_PATHS
        )

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Determine if the log record should be logged.

        Args:
            record: The log record to evaluate.

        Returns:
            False if the request path is excluded, True otherwise.
        """
        message = record.getMessage()
        return not any(
            f"{path} " in message or message.endswith(path)
            for path in self.excluded_paths
        )
