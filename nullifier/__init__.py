"""
Nullifier Module

Stores NULL instead of empty strings for text columns that allow NULLs.

This package is an installed app, so nothing model-related is imported here.
Import from the submodules once Django is set up.

Exports:
    nullifier.mixins:
        - NullifierMixin: Converts '' to None on attribute write for nullifiable fields
        - get_text_field_types(): Internal field types treated as text

    nullifier.managers:
        - NullifierQuerySet: update() applies the same conversion
        - NullifierManager: Manager built from NullifierQuerySet

    nullifier.serializers:
        - NullifierSerializerMixin: Converts incoming '' before field validation

Usage Examples:

    # Nullify every text column that allows NULLs, except 'name'
    from nullifier.mixins import NullifierMixin

    class Group(NullifierMixin):
        name = models.CharField(max_length=100, null=True, blank=True)
        description = models.TextField(null=True, blank=True)

        nullify_except = 'name'

    # Nullify only these columns (non-text and NOT NULL columns are ignored)
    class User(NullifierMixin):
        first_name = models.CharField(max_length=50, null=True, blank=True)
        last_name = models.CharField(max_length=50, null=True, blank=True)

        nullify_only = ['first_name', 'last_name']

    # Backfill rows written before the mixin was added
    python manage.py nullify_empty_strings myapp.Group
"""
