"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.comments import router as comments_router
from api.v1.routes.tags import router as tags_router
from api.v1.routes.ticket_tags import router as ticket_tags_router
from api.v1.routes.tickets import router as tickets_router

router = APIRouter()
router.include_router(tickets_router)
router.include_router(ticket_tags_router)
router.include_router(comments_router)
router.include_router(tags_router)
