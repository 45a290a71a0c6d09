"""Configuration helpers for django-rentals.

All settings use the ``RENTALS_`` prefix and are read at call time so that
``override_settings`` works in tests.
"""

from functools import lru_cache
from importlib import import_module

from django.conf import settings

from .exceptions import CollaboratorLoadError


DEFAULTS = {
    # Furthest a booking may start from today (about 6 months)
    "BOOKING_HORIZON_DAYS": 183,
    # Length of the block the monthly rate is charged for
    "MONTHLY_BLOCK_DAYS": 30,
    # Seconds to wait for the per-equipment booking lock
    "LOCK_TIMEOUT": 10.0,
    "DEFAULT_CURRENCY": "SAR",
    "EQUIPMENT_CATALOG": "django_rentals.catalog.ModelEquipmentCatalog",
    "NOTIFICATION_DISPATCHER": "django_rentals.notifications.LoggingNotificationDispatcher",
}


def get_setting(name: str, default=None):
    """Get a setting with RENTALS_ prefix, falling back to package defaults."""
    if default is None:
        default = DEFAULTS.get(name)
    return getattr(settings, f"RENTALS_{name}", default)


@lru_cache(maxsize=32)
def load_collaborator(dotted_path: str, base_class: type):
    """
    Import and instantiate a collaborator from dotted path.

    Raises CollaboratorLoadError for bad imports or classes that do not
    subclass ``base_class``.
    """
    try:
        module_path, class_name = dotted_path.rsplit(".", 1)
    except ValueError:
        raise CollaboratorLoadError(dotted_path, "Invalid dotted path format")

    try:
        module = import_module(module_path)
    except ImportError as e:
        raise CollaboratorLoadError(dotted_path, f"Cannot import module: {e}")

    try:
        collaborator_class = getattr(module, class_name)
    except AttributeError:
        raise CollaboratorLoadError(dotted_path, f"Class '{class_name}' not found in module")

    if not isinstance(collaborator_class, type) or not issubclass(collaborator_class, base_class):
        raise CollaboratorLoadError(
            dotted_path,
            f"'{class_name}' must be a subclass of {base_class.__name__}",
        )

    return collaborator_class()


def get_equipment_catalog():
    """Return the configured equipment catalog instance."""
    from .catalog import BaseEquipmentCatalog

    return load_collaborator(get_setting("EQUIPMENT_CATALOG"), BaseEquipmentCatalog)


def get_notification_dispatcher():
    """Return the configured notification dispatcher instance."""
    from .notifications import BaseNotificationDispatcher

    return load_collaborator(get_setting("NOTIFICATION_DISPATCHER"), BaseNotificationDispatcher)


def clear_collaborator_cache():
    """Clear the collaborator loading cache. Useful for testing."""
    load_collaborator.cache_clear()
