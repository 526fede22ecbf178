"""FastAPI application for shipment reconciliation.

Endpoints:
- Health and readiness checks
- Reconciliation of two XML invoices against a CSV lab report
- Prometheus metrics

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import time

from fastapi import FastAPI, File, HTTPException, Request, Response, UploadFile, status
from pydantic import BaseModel

from services.api import metrics
from services.reconciliation.engine import ReconciliationEngine
from services.reconciliation.schema import ComparisonStatus, ReconciliationResult
from services.shared.config import get_settings

settings = get_settings()
app = FastAPI(
    title="Shipment Reconciliation",
    description="Compares NF-e invoices against the lab report of a shipment",
    version=settings.service_version,
)

reconciliation_engine = ReconciliationEngine(settings)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    # Skip metrics for /metrics endpoint itself
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=request.url.path,
    ).observe(duration)

    return response


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Health check endpoint for liveness probe.

    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy", version=settings.service_version, service=settings.service_name
    )


@app.get("/ready", response_model=ReadinessResponse, tags=["Health"])
def readiness_check() -> ReadinessResponse:
    """Readiness check endpoint.

    Returns:
        Readiness status
    """
    return ReadinessResponse(ready=True)


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


async def read_upload(file: UploadFile, document: str) -> bytes:
    """Read and validate one uploaded document.

    Raises:
        HTTPException: If the upload is empty or too large
    """
    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Empty file: {document}"
        )
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large: {document} ({len(content)} bytes)",
        )

    metrics.document_upload_size_bytes.labels(document=document).observe(len(content))
    return content


@app.post(
    "/api/v1/reconciliations", response_model=ReconciliationResult, tags=["Reconciliation"]
)
async def create_reconciliation(
    invoice_a: UploadFile = File(..., description="First NF-e XML invoice"),  # noqa: B008
    invoice_b: UploadFile = File(..., description="Second NF-e XML invoice"),  # noqa: B008
    lab_report: UploadFile = File(..., description="CSV lab report (UTF-8)"),  # noqa: B008
) -> ReconciliationResult:
    """Reconcile two invoices against the lab report of the same shipment.

    ## Usage

    ```bash
    curl -X POST "http://localhost:8000/api/v1/reconciliations" \\
      -F "invoice_a=@nf1.xml" -F "invoice_b=@nf2.xml" -F "lab_report=@laudo.csv"
    ```

    ## Response Fields

    - `rows`: five comparison rows (invoice number, net weight, gross weight,
      trailer plate, seals) with status `ok`, `erro` or `N/A`
    - `product_summary`: product code, manufacture and expiry dates (status always `ok`)

    ## Error Handling

    - Returns 400 if a file is empty or too large
    - Returns 422 if a file is missing
    - Unparsable documents do not fail the request; their fields come back as `N/A`

    Raises:
        HTTPException: If an upload is invalid
    """
    content_a = await read_upload(invoice_a, "invoice_a")
    content_b = await read_upload(invoice_b, "invoice_b")
    content_lab = await read_upload(lab_report, "lab_report")

    start = time.time()
    result = await reconciliation_engine.reconcile_sources(content_a, content_b, content_lab)
    metrics.reconciliation_duration_seconds.observe(time.time() - start)

    mismatch = any(row.status == ComparisonStatus.ERROR for row in result.rows)
    metrics.reconciliations_total.labels(outcome="mismatch" if mismatch else "match").inc()

    return result
