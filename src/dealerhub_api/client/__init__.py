"""HTTP client used by the dashboard to reach the dealer admin API."""

from dealerhub_api.client.api_client import ApiDataAccess

__all__ = ["ApiDataAccess"]
