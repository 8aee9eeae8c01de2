from eventhall.models.base import Base
from eventhall.models.event import Event, EventStatus
from eventhall.models.stand import Stand
from eventhall.models.ticket import (
    SupportTicket,
    SupportTicketPriority,
    SupportTicketStatus,
    Ticket,
    TicketStatus,
    TicketType,
)
from eventhall.models.user import Role, RoleRecord, User
from eventhall.models.vendor import ContactPerson, Vendor, VendorStatus

__all__ = [
    "Base",
    "User",
    "Role",
    "RoleRecord",
    "Vendor",
    "VendorStatus",
    "ContactPerson",
    "Event",
    "EventStatus",
    "Stand",
    "Ticket",
    "TicketStatus",
    "TicketType",
    "SupportTicket",
    "SupportTicketStatus",
    "SupportTicketPriority",
]
