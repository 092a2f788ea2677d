from .http import HttpResponse, IHttpClient
from .metrics import IMetricsClient

__all__ = ["HttpResponse", "IHttpClient", "IMetricsClient"]
