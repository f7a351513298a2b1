from fastapi.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST


class MetricsHandler:
    """Serves the process-wide Prometheus registry."""

    def get_raw_metrics(self) -> Response:
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )
