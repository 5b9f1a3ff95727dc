from .tables import (
    Base,
    Clients,
    Reservations,
    Rooms,
    ServiceVariants,
    Services,
    Therapists,
    WorkShifts,
)

__all__ = [
    "Base",
    "Clients",
    "Reservations",
    "Rooms",
    "ServiceVariants",
    "Services",
    "Therapists",
    "WorkShifts",
]
