"""Groups of images whose hashes fall within a distance threshold."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_serializer

from image_hash.models.image_hash import ImageHash


class GroupMember(BaseModel):
    """One image in a similarity group."""

    model_config = ConfigDict(strict=True)

    path: str
    image_hash: ImageHash

    @field_serializer("image_hash")
    def serialize_image_hash(self, value: ImageHash) -> str:
        return str(value)


class SimilarImageGroup(BaseModel):
    """Images considered near-duplicates of the first member."""

    members: list[GroupMember]

    @property
    def paths(self) -> list[str]:
        return [member.path for member in self.members]

    def __len__(self) -> int:
        return len(self.members)
