from django.apps import AppConfig


class NullifierConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'nullifier'
    verbose_name = 'Empty String Nullifier'
