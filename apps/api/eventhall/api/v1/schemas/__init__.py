from eventhall.api.v1.schemas.common import MessageOut, PageOut
from eventhall.api.v1.schemas.events import (
    EventCreate,
    EventDeleteOut,
    EventOut,
    EventStatisticsOut,
    EventUpdate,
    PublicEventOut,
)
from eventhall.api.v1.schemas.stands import (
    StandAssignVendorIn,
    StandBulkCreate,
    StandBulkOut,
    StandCreate,
    StandOut,
    StandUpdate,
)
from eventhall.api.v1.schemas.tickets import (
    PricingQuoteIn,
    PricingQuoteOut,
    SupportTicketCreate,
    SupportTicketOut,
    SupportTicketUpdate,
    TicketCreate,
    TicketDeleteOut,
    TicketOut,
    TicketStatisticsOut,
    TicketUpdate,
)
from eventhall.api.v1.schemas.users import (
    ContactFormIn,
    LoginIn,
    MeOut,
    PasswordResetIn,
    TokenOut,
    UserCreate,
    UserOut,
    UserUpdate,
)
from eventhall.api.v1.schemas.vendors import (
    ContactAccountCreate,
    ContactPersonCreate,
    ContactPersonOut,
    ContactPersonUpdate,
    VendorCreate,
    VendorDeleteOut,
    VendorOut,
    VendorUpdate,
)

__all__ = [
    "MessageOut",
    "PageOut",
    "EventCreate",
    "EventUpdate",
    "EventOut",
    "EventDeleteOut",
    "EventStatisticsOut",
    "PublicEventOut",
    "StandCreate",
    "StandUpdate",
    "StandOut",
    "StandAssignVendorIn",
    "StandBulkCreate",
    "StandBulkOut",
    "TicketCreate",
    "TicketUpdate",
    "TicketOut",
    "TicketDeleteOut",
    "TicketStatisticsOut",
    "PricingQuoteIn",
    "PricingQuoteOut",
    "SupportTicketCreate",
    "SupportTicketUpdate",
    "SupportTicketOut",
    "VendorCreate",
    "VendorUpdate",
    "VendorOut",
    "VendorDeleteOut",
    "ContactPersonCreate",
    "ContactPersonUpdate",
    "ContactPersonOut",
    "ContactAccountCreate",
    "UserCreate",
    "UserUpdate",
    "UserOut",
    "PasswordResetIn",
    "LoginIn",
    "TokenOut",
    "MeOut",
    "ContactFormIn",
]
