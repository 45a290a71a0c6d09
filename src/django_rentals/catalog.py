"""Equipment catalog collaborator.

The reservation engine only needs three facts about a listing: who owns it,
what it costs and whether it is open for rental. Projects with their own
listing model point ``RENTALS_EQUIPMENT_CATALOG`` at a subclass of
BaseEquipmentCatalog.
"""

from dataclasses import dataclass

from .exceptions import EquipmentNotFoundError
from .pricing import RateSchedule


@dataclass(frozen=True)
class EquipmentRecord:
    equipment_id: str
    owner_id: str
    rate_schedule: RateSchedule
    is_available_for_rental: bool
    title: str = ""


class BaseEquipmentCatalog:
    """Read-only lookup of listings by id."""

    def get(self, equipment_id: str) -> EquipmentRecord:
        """
        Return the record for ``equipment_id``.

        Raises:
            EquipmentNotFoundError: If the listing does not exist
        """
        raise NotImplementedError("Subclasses must implement get()")

    def delete(self, equipment_id: str) -> None:
        """Permanently remove the listing."""
        raise NotImplementedError("Subclasses must implement delete()")


class ModelEquipmentCatalog(BaseEquipmentCatalog):
    """Catalog backed by the Equipment model."""

    def _get_model(self, equipment_id):
        from .models import Equipment

        try:
            return Equipment.objects.get(pk=equipment_id)
        except (Equipment.DoesNotExist, ValueError):
            raise EquipmentNotFoundError(str(equipment_id))

    def get(self, equipment_id: str) -> EquipmentRecord:
        equipment = self._get_model(equipment_id)
        return EquipmentRecord(
            equipment_id=str(equipment.pk),
            owner_id=equipment.owner_id,
            rate_schedule=RateSchedule(
                daily_rate=equipment.daily_rate,
                monthly_rate=equipment.monthly_rate,
                currency=equipment.currency,
            ),
            is_available_for_rental=equipment.is_available_for_rental,
            title=equipment.title,
        )

    def delete(self, equipment_id: str) -> None:
        self._get_model(equipment_id).delete()
