from __future__ import annotations

from rest_framework import serializers

from apps.storage.domain.presets import PRESETS


class UploadImageSerializer(serializers.Serializer):
    image = serializers.FileField()
    kind = serializers.ChoiceField(choices=sorted(PRESETS), default="general", required=False)


class DeleteUploadSerializer(serializers.Serializer):
    key = serializers.CharField(max_length=500)
