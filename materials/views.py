"""Material endpoints: everyone signed in reads, staff write."""
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.permissions import IsStaffRole
from .models import Material
from .serializers import MaterialSerializer


class MaterialViewSet(viewsets.ModelViewSet):
    queryset = Material.objects.select_related("author__profile")
    serializer_class = MaterialSerializer
    search_fields = ["title", "description"]
    ordering_fields = ["created_at", "title"]

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [IsAuthenticated()]
        return [IsStaffRole()]

    def list(self, request, *args, **kwargs):
        qs = self.filter_queryset(self.get_queryset())
        return Response({"message": "Materials retrieved.", "data": self.get_serializer(qs, many=True).data})

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        ser.save(author=request.user)
        return Response({"message": "Material created.", "data": ser.data}, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        ser = self.get_serializer(self.get_object(), data=request.data, partial=kwargs.get("partial", False))
        ser.is_valid(raise_exception=True)
        ser.save()
        return Response({"message": "Material updated.", "data": ser.data})

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"message": "Material deleted."})
