from enum import Enum

from eventhall.models import ContactPerson, Event, Stand, SupportTicket, Ticket, User, Vendor


class Resource(str, Enum):
    EVENT = "event"
    STAND = "stand"
    VENDOR = "vendor"
    CONTACT_PERSON = "contact_person"
    TICKET = "ticket"
    SUPPORT_TICKET = "support_ticket"
    USER = "user"


class Action(str, Enum):
    VIEW_ANY = "view_any"
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


MODEL_RESOURCES: dict[type, Resource] = {
    Event: Resource.EVENT,
    Stand: Resource.STAND,
    Vendor: Resource.VENDOR,
    ContactPerson: Resource.CONTACT_PERSON,
    Ticket: Resource.TICKET,
    SupportTicket: Resource.SUPPORT_TICKET,
    User: Resource.USER,
}


def resource_for(model: type) -> Resource:
    try:
        return MODEL_RESOURCES[model]
    except KeyError:
        raise ValueError(f"no authorization resource registered for {model.__name__}") from None
