"""Listing deletion guard.

Deleting a listing with active bookings is allowed but must be confirmed
explicitly. The bookings are never cancelled or removed by the deletion:
they stay queryable by id with their own equipment_id and title snapshot.

Only an admin purge physically removes bookings, and it too must
acknowledge any active ones.
"""

import logging
from dataclasses import dataclass

from django.db import transaction

from .availability import active_booking_count
from .conf import get_equipment_catalog
from .exceptions import DeletionNotPermittedError, DeletionRequiresConfirmation
from .identity import as_principal
from .locks import equipment_lock
from .models import Booking


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeletionSafety:
    active_booking_count: int

    @property
    def requires_confirmation(self) -> bool:
        return self.active_booking_count > 0


def check_deletion_safety(equipment_id) -> DeletionSafety:
    """
    Count the pending and confirmed bookings a deletion would orphan.

    Raises:
        AvailabilityUnavailableError: If the booking store cannot be read
    """
    return DeletionSafety(active_booking_count=active_booking_count(equipment_id))


def delete_equipment(equipment_id, actor, *, confirmed: bool = False) -> DeletionSafety:
    """
    Permanently delete a listing from the catalog.

    Args:
        equipment_id: The listing to delete
        actor: Principal (or user id); must be the owner or an admin
        confirmed: Second, explicit confirmation after the active-booking warning

    Returns:
        The DeletionSafety the deletion proceeded with

    Raises:
        EquipmentNotFoundError: If the listing does not exist
        DeletionNotPermittedError: If the actor is neither owner nor admin
        DeletionRequiresConfirmation: If active bookings exist and confirmed is False
        AvailabilityUnavailableError: If the listing's booking lock cannot be taken in time
    """
    equipment_id = str(equipment_id)
    actor = as_principal(actor)
    catalog = get_equipment_catalog()

    record = catalog.get(equipment_id)
    if not (actor.is_admin or actor.user_id == record.owner_id):
        raise DeletionNotPermittedError(equipment_id, actor.user_id)

    # Same lock as request_booking, so no booking appears between count and delete
    with equipment_lock(equipment_id):
        safety = check_deletion_safety(equipment_id)
        if safety.requires_confirmation and not confirmed:
            logger.warning(
                "Deletion of equipment %s needs confirmation: %s active booking(s)",
                equipment_id, safety.active_booking_count,
            )
            raise DeletionRequiresConfirmation(equipment_id, safety.active_booking_count)

        catalog.delete(equipment_id)

    logger.info(
        "Equipment %s deleted by %s; %s active booking(s) left in place",
        equipment_id, actor.user_id, safety.active_booking_count,
    )
    return safety


@transaction.atomic
def purge_bookings(equipment_id, actor, *, acknowledge_active: bool = False) -> int:
    """
    Physically remove every booking of a listing. Admin only.

    Returns:
        Number of bookings removed

    Raises:
        DeletionNotPermittedError: If the actor is not an admin
        DeletionRequiresConfirmation: If active bookings exist and were not acknowledged
    """
    equipment_id = str(equipment_id)
    actor = as_principal(actor)
    if not actor.is_admin:
        raise DeletionNotPermittedError(equipment_id, actor.user_id)

    bookings = Booking.objects.for_equipment(equipment_id)
    active = bookings.active().count()
    if active and not acknowledge_active:
        raise DeletionRequiresConfirmation(equipment_id, active)

    count = bookings.count()
    bookings.delete()
    logger.warning(
        "Purged %s booking(s) of equipment %s (%s active) by %s",
        count, equipment_id, active, actor.user_id,
    )
    return count
