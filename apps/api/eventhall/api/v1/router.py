from fastapi import APIRouter

from eventhall.api.v1.auth import router as auth_router
from eventhall.api.v1.contact_persons import router as contact_persons_router
from eventhall.api.v1.events import router as events_router
from eventhall.api.v1.public import router as public_router
from eventhall.api.v1.stands import router as stands_router
from eventhall.api.v1.support_tickets import router as support_tickets_router
from eventhall.api.v1.tickets import router as tickets_router
from eventhall.api.v1.users import router as users_router
from eventhall.api.v1.vendors import router as vendors_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(events_router)
router.include_router(stands_router)
router.include_router(tickets_router)
router.include_router(support_tickets_router)
router.include_router(vendors_router)
router.include_router(contact_persons_router)
router.include_router(users_router)
router.include_router(public_router)
