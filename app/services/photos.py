from collections import defaultdict
from typing import Dict, List, Sequence

from app.models.photo import Photo, PhotoOwner, PhotoRole
from app.services.storage import StorageQuery


def photo_paths(
    storage: StorageQuery,
    owner_type: PhotoOwner,
    owner_ids: Sequence[int],
    role: PhotoRole,
) -> Dict[int, List[str]]:
    """
    Load photo paths for many owners of one kind in a single query.

    Returns:
        Mapping of owner id to photo paths in upload order. Owners without
        photos are absent from the mapping.
    """
    if not owner_ids:
        return {}

    photos = storage.find(
        Photo,
        Photo.owner_type == owner_type,
        Photo.owner_id.in_(list(owner_ids)),
        Photo.role == role,
        order_by=(Photo.id.asc(),),
    )

    paths = defaultdict(list)
    for photo in photos:
        paths[photo.owner_id].append(photo.path)
    return dict(paths)
