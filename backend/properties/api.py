from rest_framework import permissions, viewsets

from .models import Property
from .serializers import PropertySerializer


class PropertyViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PropertySerializer
    permission_classes = [permissions.IsAuthenticated]
    queryset = Property.objects.select_related("agent")
    filterset_fields = ["bedrooms", "bathrooms"]
    search_fields = ["name", "address", "description"]
    ordering_fields = ["price", "rating", "name"]
