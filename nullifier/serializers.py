"""
Serializer support for NullifierMixin models.

A ModelSerializer builds CharFields with allow_blank=False for model fields
declared without blank=True, so '' is rejected before the model ever gets a
chance to store NULL. NullifierSerializerMixin converts incoming '' to None
for nullifiable fields first, so validation sees the value that will be saved.
"""
from rest_framework import serializers


class NullifierSerializerMixin:
    """
    Mixin for ModelSerializers whose Meta.model uses NullifierMixin.

    Usage:
        class ContactSerializer(NullifierSerializerMixin, serializers.ModelSerializer):
            class Meta:
                model = Contact
                fields = ['id', 'first_name', 'last_name', 'phone']

    Serializers for models without NullifierMixin behave as usual.
    """

    def get_nullifiable_field_names(self):
        """
        Serializer field names whose incoming '' is converted to None.

        Only writable fields mapped directly onto a model attribute are
        considered (no source='*' and no dotted sources).

        Returns:
            list: Field names as they appear in the incoming data
        """
        model = getattr(getattr(self, 'Meta', None), 'model', None)
        is_nullifiable = getattr(model, 'is_nullifiable', None)
        if is_nullifiable is None:
            return []

        names = []
        for field_name, field in self.fields.items():
            if field.read_only or field.source == '*' or '.' in field.source:
                continue
            if is_nullifiable(field.source):
                names.append(field_name)
        return names

    def to_internal_value(self, data):
        """Replace '' with None for nullifiable fields, then validate as usual"""
        if isinstance(data, dict):
            field_names = [name for name in self.get_nullifiable_field_names() if data.get(name) == '']
            if field_names:
                # QueryDict.copy() returns a mutable copy
                data = data.copy()
                for name in field_names:
                    data[name] = None
        return super().to_internal_value(data)


class NullifierModelSerializer(NullifierSerializerMixin, serializers.ModelSerializer):
    """ModelSerializer with NullifierSerializerMixin applied."""
