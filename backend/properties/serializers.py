from rest_framework import serializers

from .models import Property


class PropertySerializer(serializers.ModelSerializer):
    agent_name = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            "id",
            "name",
            "address",
            "description",
            "price",
            "rating",
            "bedrooms",
            "bathrooms",
            "area",
            "image",
            "agent",
            "agent_name",
        ]
        read_only_fields = fields

    def get_agent_name(self, obj: Property) -> str | None:
        if obj.agent is None:
            return None
        return obj.agent.name
