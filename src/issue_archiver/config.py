"""Runtime settings for issue assembly."""

import os
from typing import Literal

from pydantic import BaseModel, Field

from issue_archiver import __version__

DEFAULT_PUBLICATION_TITLE = "The Daily Princetonian"
DEFAULT_ISSUE_PREFIX = "dailyprincetonian"
DEFAULT_BASE_URL = "https://www.dailyprincetonian.com"
DEFAULT_CREATOR_AGENT = "Automated Articles Issue Archiver"

# Physical page size used for rendering; ALTO pixel dimensions derive from it.
PAGE_WIDTH_INCHES = 8.5
PAGE_HEIGHT_INCHES = 11.0


class ArchiveSettings(BaseModel):
    """Settings for one assembly run.

    Attributes:
        publication_title: Title used in METS labels and MODS
        issue_prefix: Prefix of the timestamped issue name
        volume_number: Volume number of the issue
        issue_number: Issue number within the volume
        dpi: Resolution for rasterization and ALTO page dimensions
        image_quality: Quality setting passed to the rasterizer
        generate_images: Whether page images are produced
        rasterizer: "magick" (external ImageMagick) or "pymupdf" (in-process)
        alto_workers: Thread pool size for per-page ALTO generation
        creator_agent: METS creator agent name
        creator_version: METS creator agent version
    """

    publication_title: str = DEFAULT_PUBLICATION_TITLE
    issue_prefix: str = DEFAULT_ISSUE_PREFIX
    volume_number: int = Field(default=147, ge=1, le=3999)
    issue_number: int = Field(default=1, ge=1)
    dpi: int = Field(default=400, gt=0)
    image_quality: int = Field(default=90, ge=1, le=100)
    generate_images: bool = False
    rasterizer: Literal["magick", "pymupdf"] = "magick"
    alto_workers: int = Field(default=4, ge=1)
    creator_agent: str = DEFAULT_CREATOR_AGENT
    creator_version: str = __version__

    @property
    def page_width_px(self) -> int:
        return round(PAGE_WIDTH_INCHES * self.dpi)

    @property
    def page_height_px(self) -> int:
        return round(PAGE_HEIGHT_INCHES * self.dpi)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> "ArchiveSettings":
        """Build settings from environment variables.

        Recognized variables: GENERATE_IMAGES, ARCHIVE_DPI,
        ARCHIVE_IMAGE_QUALITY, ARCHIVE_VOLUME, ARCHIVE_ISSUE_NUMBER,
        ARCHIVE_RASTERIZER. Keyword overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict = {}
        if "GENERATE_IMAGES" in env:
            values["generate_images"] = env["GENERATE_IMAGES"].lower() == "true"
        mapping = {
            "ARCHIVE_DPI": "dpi",
            "ARCHIVE_IMAGE_QUALITY": "image_quality",
            "ARCHIVE_VOLUME": "volume_number",
            "ARCHIVE_ISSUE_NUMBER": "issue_number",
            "ARCHIVE_RASTERIZER": "rasterizer",
        }
        for var, key in mapping.items():
            if var in env:
                values[key] = env[var]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
