from dataclasses import dataclass
from enum import Enum

from ...database.db import SERVICES, BANNERS, FAQS, GALLERIES


class ResourceType(str, Enum):
    SERVICE = "service"
    BANNER = "banner"
    FAQ = "faq"
    GALLERY = "gallery"


@dataclass(frozen=True)
class ResourceConfig:
    """How one content collection is exposed over HTTP"""
    type: ResourceType
    collection: str
    prefix: str
    label: str
    has_image: bool = True
    allow_get_by_id: bool = False


RESOURCES = {
    ResourceType.SERVICE: ResourceConfig(
        type=ResourceType.SERVICE,
        collection=SERVICES,
        prefix="/api/services",
        label="Service",
        allow_get_by_id=True,
    ),
    ResourceType.BANNER: ResourceConfig(
        type=ResourceType.BANNER,
        collection=BANNERS,
        prefix="/api/banners",
        label="Banner",
    ),
    ResourceType.FAQ: ResourceConfig(
        type=ResourceType.FAQ,
        collection=FAQS,
        prefix="/api/faqs",
        label="FAQ",
        has_image=False,
    ),
    ResourceType.GALLERY: ResourceConfig(
        type=ResourceType.GALLERY,
        collection=GALLERIES,
        prefix="/api/galleries",
        label="Gallery",
    ),
}
