"""Mixin for models that store NULL instead of empty strings.

Add NullifierMixin to a model and every text column that allows NULLs gets
None written in place of ''. Narrow the columns with ``nullify_only`` and
``nullify_except``.
"""

import logging

from django.conf import settings
from django.core.exceptions import FieldDoesNotExist
from django.db import models

from nullifier.managers import NullifierManager

logger = logging.getLogger(__name__)

DEFAULT_TEXT_FIELD_TYPES = ('CharField', 'TextField')

CACHE_ATTRIBUTE = '_nullable_fields_cache'


def get_text_field_types():
    """
    Internal field types treated as text.

    Returns:
        frozenset: Names as returned by Field.get_internal_type()
    """
    return frozenset(getattr(settings, 'NULLIFIER_TEXT_FIELD_TYPES', DEFAULT_TEXT_FIELD_TYPES))


def flatten_field_names(names):
    """
    Flatten a field name or a (possibly nested) sequence of names.

    Example:
        flatten_field_names('name')                  # ['name']
        flatten_field_names(['a', ('b', ['c'])])     # ['a', 'b', 'c']
        flatten_field_names(None)                    # []
    """
    if names is None:
        return []
    if isinstance(names, str):
        return [names]
    flat = []
    for name in names:
        flat.extend(flatten_field_names(name))
    return flat


def is_empty_string(value):
    return isinstance(value, str) and value == ''


class NullifierMixin(models.Model):
    """
    Ask the model to store NULLs instead of empty strings.

    Configuration (class attributes):
        - nullify_only: Nullify only these fields. Defaults to every concrete field.
          Non-text and NOT NULL fields are ignored at write time.
        - nullify_except: Nullify all text fields that allow NULLs, except these.

    Both accept a single field name or a sequence of names. A ForeignKey listed
    by name also covers its column attribute (``category`` -> ``category_id``);
    '' written to that attribute becomes None when the target key is a text
    column that the relation allows to be NULL.

    Methods:
        - get_nullable_fields(): Configured field names (cached per model class)
        - is_nullifiable(name): Whether '' written to `name` becomes None
        - nullify_value(name, value): The value that will actually be stored
        - nullify_values(values): Same for a dict of field_name -> value

    Usage:
        class Group(NullifierMixin):
            name = models.CharField(max_length=100, null=True, blank=True)
            description = models.TextField(null=True, blank=True)

            nullify_except = 'name'

        group = Group(name='', description='')
        group.name         # ''
        group.description  # None

    Note: Assignment, Model(...), objects.create(), ModelForm and serializer
    saves all go through __setattr__. QuerySet.update() does not, which is why
    the default manager is a NullifierManager.
    """
    nullify_only = None
    nullify_except = ()

    objects = NullifierManager()

    class Meta:
        abstract = True

    @classmethod
    def get_nullable_fields(cls):
        """
        Field names configured for nullification, before type/NULL filtering.

        Computed on first use and cached on the model class itself, so each
        subclass gets its own set.

        Returns:
            frozenset: only (or all concrete field names) minus except
        """
        fields = cls.__dict__.get(CACHE_ATTRIBUTE)
        if fields is None:
            fields = cls._compute_nullable_fields()
            setattr(cls, CACHE_ATTRIBUTE, fields)
        return fields

    @classmethod
    def _compute_nullable_fields(cls):
        if cls.nullify_only is None:
            only = [field.name for field in cls._meta.concrete_fields]
        else:
            only = flatten_field_names(cls.nullify_only)
        exclude = flatten_field_names(cls.nullify_except)

        unknown = sorted({str(name) for name in only + exclude} - cls._declared_field_names())
        if unknown:
            logger.warning(
                f"{cls._meta.label} nullifier configuration names unknown fields: {', '.join(unknown)}"
            )

        return cls._with_attnames(only) - cls._with_attnames(exclude)

    @classmethod
    def _with_attnames(cls, names):
        # Relations are written through their column attribute (parent_id)
        expanded = set()
        for name in names:
            name = str(name)
            expanded.add(name)
            try:
                expanded.add(cls._meta.get_field(name).attname)
            except (FieldDoesNotExist, AttributeError):
                pass
        return frozenset(expanded)

    @classmethod
    def _declared_field_names(cls):
        names = set()
        for field in cls._meta.concrete_fields:
            names.add(field.name)
            names.add(field.attname)
        return names

    @classmethod
    def _is_nullable_text_field(cls, name):
        try:
            field = cls._meta.get_field(name)
        except FieldDoesNotExist:
            return False
        if getattr(field, 'null', False) is not True:
            return False

        if field.is_relation:
            # Only the raw column of a ForeignKey/OneToOneField, typed by its target
            if not field.concrete or name != field.attname:
                return False
            field_type = field.target_field.get_internal_type()
        else:
            field_type = field.get_internal_type()
        return field_type in get_text_field_types()

    @classmethod
    def is_nullifiable(cls, name):
        """
        Check whether an empty string written to `name` is stored as None.

        Membership in get_nullable_fields() is checked first, then the field's
        current schema (text type that allows NULL).
        """
        name = str(name)
        return name in cls.get_nullable_fields() and cls._is_nullable_text_field(name)

    @classmethod
    def nullify_value(cls, name, value):
        if is_empty_string(value) and cls.is_nullifiable(name):
            return None
        return value

    @classmethod
    def nullify_values(cls, values):
        """
        Apply nullify_value() to a dict of field_name -> value.

        Returns:
            dict: New dict, the input is left untouched
        """
        return {name: cls.nullify_value(name, value) for name, value in values.items()}

    def __setattr__(self, name, value):
        """Write None instead of '' for nullifiable fields, then delegate."""
        model = type(self)
        if name in model.get_nullable_fields() and is_empty_string(value):
            if model._is_nullable_text_field(name):
                logger.debug(f"Nullifying empty string for {model._meta.label}.{name}")
                value = None
        super().__setattr__(name, value)
