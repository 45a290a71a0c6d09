from django.apps import AppConfig


class DjangoRentalsConfig(AppConfig):
    name = "django_rentals"
    verbose_name = "Rentals"
    default_auto_field = "django.db.models.BigAutoField"
