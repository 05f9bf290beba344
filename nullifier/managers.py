"""
Nullifier Managers Module

QuerySet.update() writes straight to the database without touching model
instances, so NullifierMixin.__setattr__ never sees those values. These
querysets apply the same '' -> None conversion to update() keyword values.

Exports:
    QuerySets:
        - NullifierQuerySet: update(), empty_strings()

    Managers:
        - NullifierManager: Default manager of NullifierMixin models

Usage:
    from nullifier.mixins import NullifierMixin

    class Contact(NullifierMixin):
        nickname = models.CharField(max_length=50, null=True, blank=True)

    Contact.objects.filter(pk=1).update(nickname='')  # stores NULL

    # Custom managers keep the behavior by building on the queryset
    class ContactQuerySet(NullifierQuerySet):
        def named(self):
            return self.exclude(nickname__isnull=True)
"""

from django.db import models


class NullifierQuerySet(models.QuerySet):
    """
    QuerySet whose update() stores NULL instead of '' for nullifiable fields.

    Models without NullifierMixin get the stock QuerySet behavior.
    """

    def update(self, **kwargs):
        nullify_values = getattr(self.model, 'nullify_values', None)
        if nullify_values is not None:
            kwargs = nullify_values(kwargs)
        return super().update(**kwargs)

    update.alters_data = True

    def empty_strings(self, field_name):
        """
        Rows that still hold '' in `field_name`.

        Args:
            field_name: Name of a text field

        Returns:
            Filtered QuerySet
        """
        return self.filter(**{field_name: ''})


NullifierManager = models.Manager.from_queryset(NullifierQuerySet, 'NullifierManager')
