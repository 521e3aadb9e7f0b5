from rest_framework import serializers


class KeyAliasMixin:
    """
    Accept alternate (camelCase) input keys for serializer fields.

    `key_aliases` maps the incoming key to the field name, e.g.
    {"rideId": "ride_id"}. The field name wins when both are sent.
    """
    key_aliases = {}

    def to_internal_value(self, data):
        if self.key_aliases and hasattr(data, "items"):
            renamed = {}
            for key, value in data.items():
                renamed[self.key_aliases.get(key, key)] = value
            for key, field_name in self.key_aliases.items():
                if field_name in data:
                    renamed[field_name] = data[field_name]
            data = renamed
        return super().to_internal_value(data)


class StatusSerializer(serializers.Serializer):
    """Body of the status update endpoints. Membership is checked by the services."""
    status = serializers.CharField()
