"""
Metrics API Response Validator

Validates the avgTps response structure before points reach the point
validator. Only the envelope is checked here; individual points are
validated (and dropped) downstream.
"""

from typing import Any

from chain_metrics.ingestion.adapters.metrics_api.exceptions import ResponseShapeError


class ResponseValidator:
    """Validates metrics API response structures."""

    @staticmethod
    def validate_avg_tps_response(data: Any) -> tuple[bool, str]:
        """
        Validate avgTps response structure.

        Expected format:
        {
            "results": [
                {"timestamp": 1735689600, "value": 12.5},
                ...
            ],
            ...
        }

        Args:
            data: Response data to validate

        Returns:
            Tuple of (is_valid, error_message)
        """
        if not data:
            return False, "Response body is empty"

        if not isinstance(data, dict):
            return False, f"Response must be an object, got {type(data).__name__}"

        if "results" not in data:
            return False, "Response missing required 'results' field"

        if not isinstance(data["results"], list):
            return (
                False,
                f"'results' must be a list, got {type(data['results']).__name__}",
            )

        return True, "Valid"

    @classmethod
    def extract_points(cls, data: Any, chain_id: str | None = None) -> list[Any]:
        """
        Return the raw point list of a valid response.

        Raises:
            ResponseShapeError: If the envelope is invalid
        """
        is_valid, message = cls.validate_avg_tps_response(data)
        if not is_valid:
            raise ResponseShapeError(message, chain_id=chain_id, status_code=200)
        return data["results"]
