"""OpenTelemetry tracing for the storefront API.

Built from settings at startup when TELEMETRY_ENABLED is true. Spans cover
incoming requests (FastAPI), Redis commands issued by the response cache,
and log records (trace_id/span_id injected). Exporter is picked by
TELEMETRY_EXPORTER: "console" for local runs, "otlp" for a collector,
"none" to trace without exporting.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from app.core.config import Settings

logger = logging.getLogger(__name__)

# Liveness probes, excluded from request spans.
UNTRACED_URLS = ("/api/health", "/api/health/ping", "/api/health/live", "/api/sync/ping")


class TelemetryConfig:
    """Owns the tracer provider and the instrumentors attached to it.

    Instrumentation failures are logged and leave the API running untraced.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.environment,
            sample_rate=settings.telemetry_sample_rate,
        )

    @staticmethod
    def _build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
        if exporter_type == "none":
            return None
        if exporter_type == "otlp":
            if otlp_endpoint:
                logger.info("Exporting spans over OTLP to %s", otlp_endpoint)
                return OTLPSpanExporter(
                    endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
                )
            logger.warning("TELEMETRY_EXPORTER=otlp without TELEMETRY_OTLP_ENDPOINT, using console")
        elif exporter_type != "console":
            logger.warning("Unknown exporter type '%s', using console", exporter_type)
        return ConsoleSpanExporter()

    def setup_telemetry(
        self, exporter_type: str = "console", otlp_endpoint: str | None = None
    ) -> TracerProvider | None:
        """Create the tracer provider and register it globally.

        Args:
            exporter_type: "console", "otlp", or "none".
            otlp_endpoint: OTLP gRPC endpoint (e.g. http://localhost:4317).

        Returns:
            The provider, or None if it could not be created.
        """
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            exporter = self._build_exporter(exporter_type, otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception as e:
            logger.exception("Failed to initialize telemetry: %s", e)
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing enabled for %s %s (exporter=%s, sample_rate=%s)",
            self.service_name,
            self.service_version,
            exporter_type,
            self.sample_rate,
        )
        return provider

    def instrument(self, app: FastAPI) -> None:
        """Attach FastAPI, Redis and logging instrumentation to the provider."""
        if self.tracer_provider is None:
            return
        instrumentors = (
            (
                "FastAPI",
                lambda: FastAPIInstrumentor.instrument_app(
                    app,
                    tracer_provider=self.tracer_provider,
                    excluded_urls=",".join(UNTRACED_URLS),
                ),
            ),
            ("Redis", lambda: RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)),
            (
                "logging",
                lambda: LoggingInstrumentor().instrument(tracer_provider=self.tracer_provider),
            ),
        )
        for name, attach in instrumentors:
            try:
                attach()
            except Exception as e:
                logger.exception("Failed to instrument %s: %s", name, e)
            else:
                logger.debug("%s instrumentation enabled", name)

    def shutdown(self) -> None:
        """Flush pending spans and stop the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception as e:
            logger.exception("Error during telemetry shutdown: %s", e)
        self.tracer_provider = None


_telemetry: TelemetryConfig | None = None


def get_telemetry() -> TelemetryConfig | None:
    """Return the process telemetry instance set at startup, if any."""
    return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    """Set (or reset with None) the process telemetry instance."""
    global _telemetry
    _telemetry = telemetry
