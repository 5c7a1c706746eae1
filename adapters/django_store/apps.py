"""
Salon Store - App Configuration
===============================
Django ORM persistence for bookings, arrivals and promotions.
"""

from django.apps import AppConfig


class DjangoStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "adapters.django_store"
    label = "salon_store"
    verbose_name = "Salon Store"
