from fastapi import APIRouter

from relay.api.routes.feedbacks import router as feedbacks_router
from relay.api.routes.health import api_router as hello_router
from relay.api.routes.health import router as health_router
from relay.api.routes.metrics import router as metrics_router
from relay.api.routes.pusher_auth import router as pusher_auth_router
from relay.api.routes.static import router as static_router
from relay.api.routes.upload import router as upload_router

api_router = APIRouter()
api_router.include_router(upload_router)
api_router.include_router(pusher_auth_router)
api_router.include_router(metrics_router)
api_router.include_router(hello_router)

root_router = APIRouter()
root_router.include_router(health_router)
root_router.include_router(feedbacks_router)
# Registered last: the bundle fallback matches every remaining GET path.
root_router.include_router(static_router)
