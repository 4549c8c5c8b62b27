"""Ranking endpoints."""
from __future__ import annotations

from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import role_of
from api.permissions import IsStaffRole
from . import utils


class TopStudentsView(APIView):
    def get(self, request):
        data = utils.top_students_for(role_of(request.user))
        message = "Top students retrieved." if data["attempts"] or data["isRevealed"] else "The ranking has not been announced yet."
        return Response({"message": message, "data": data})


class RevealRankingView(APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        utils.set_ranking_visibility(True)
        return Response({"message": "The ranking is now visible to students."})


class HideRankingView(APIView):
    permission_classes = [IsStaffRole]

    def post(self, request):
        utils.set_ranking_visibility(False)
        return Response({"message": "The ranking is now hidden from students."})
