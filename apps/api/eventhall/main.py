from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from eventhall.api.errors import register_error_handlers
from eventhall.api.v1.router import router as v1_router
from eventhall.core.config import settings
from eventhall.core.logging import configure_logging
from eventhall.middleware.rate_limit import RateLimitMiddleware
from eventhall.middleware.request_id import RequestIdMiddleware
from eventhall.middleware.security_headers import SecurityHeadersMiddleware

configure_logging()

app = FastAPI(title="Eventhall API")

# Starlette runs the last added middleware first (outermost):
# request id and security headers wrap everything, CORS answers preflights,
# rate limiting sits closest to the routes.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

register_error_handlers(app)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"name": "Eventhall API", "status": "ok"}


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(v1_router, prefix="/v1")
