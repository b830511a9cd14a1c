"""Pipeline orchestrator for end-to-end issue assembly.

Runs one issue through every stage:

    capture -> merge -> images (optional) -> text -> alto -> mets -> package

and reports the outcome as an AssemblyResult. Per-unit capture failures are
absorbed by the assembler; any other stage failure stops the run and is
reported with the name of the stage that failed.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime

from issue_archiver.assembly.assembler import IssueAssembler, NoContent
from issue_archiver.assembly.ordering import DateWindow, order_descriptors
from issue_archiver.capture.adapter import ContentCaptureAdapter
from issue_archiver.compilers.mets_generator import METSGenerator, utc_now
from issue_archiver.compilers.package_writer import ArchivePackageWriter
from issue_archiver.config import ArchiveSettings
from issue_archiver.exceptions import ArchiverError
from issue_archiver.naming import issue_name
from issue_archiver.transformers.alto_generator import ALTOGenerator
from issue_archiver.transformers.page_text import PageTextResolver
from issue_archiver.transformers.pdf_merger import PDFMerger
from issue_archiver.transformers.rasterizer import Rasterizer, build_rasterizer
from schemas.bundle import AssemblyResult, Stage
from schemas.descriptor import ArticleDescriptor, NewsletterDescriptor

logger = logging.getLogger(__name__)


class Orchestrator:
    """End-to-end issue assembly.

    Stage components default to the standard implementations configured
    from ``settings`` and can be replaced for testing.

    Attributes:
        adapter: Capture adapter; opened and closed around the capture stage
        settings: Archive settings
        clock: Returns the current time; fixes the issue name and CREATEDATE
    """

    def __init__(
        self,
        adapter: ContentCaptureAdapter,
        settings: ArchiveSettings | None = None,
        *,
        merger: PDFMerger | None = None,
        rasterizer: Rasterizer | None = None,
        resolver: PageTextResolver | None = None,
        alto_generator: ALTOGenerator | None = None,
        mets_generator: METSGenerator | None = None,
        writer: ArchivePackageWriter | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.adapter = adapter
        self.settings = settings or ArchiveSettings()
        self.clock = clock

        self.merger = merger or PDFMerger()
        self.rasterizer = rasterizer
        self.resolver = resolver or PageTextResolver()
        self.alto_generator = alto_generator or ALTOGenerator(
            width_px=self.settings.page_width_px,
            height_px=self.settings.page_height_px,
            max_workers=self.settings.alto_workers,
        )
        self.mets_generator = mets_generator or METSGenerator(self.settings, clock=clock)
        self.writer = writer or ArchivePackageWriter()

    def run(
        self,
        descriptors: Sequence[ArticleDescriptor | NewsletterDescriptor],
        *,
        window: DateWindow | None = None,
        issue_date: date | None = None,
    ) -> AssemblyResult:
        """Assemble one issue.

        Args:
            descriptors: Articles and newsletters to include
            window: Newsletter publication window
            issue_date: Issue date; defaults to the window's end date, or
                the run date when there is no window

        Returns:
            AssemblyResult describing the outcome; never raises for stage
            failures
        """
        started_at = self.clock()
        name = issue_name(started_at, self.settings.issue_prefix)
        if issue_date is None:
            issue_date = window.end.date() if window else started_at.date()

        logger.info(f"Assembling {name} for {issue_date.isoformat()}")
        ordered = order_descriptors(descriptors, window)

        stage: Stage = "capture"
        try:
            with self.adapter:
                assembler = IssueAssembler(self.adapter, self.settings)
                outcome = assembler.assemble(
                    ordered, issue_name=name, issue_date=issue_date
                )

            if isinstance(outcome, NoContent):
                return AssemblyResult(
                    ok=True,
                    no_content=True,
                    issue_name=name,
                    issue_date=issue_date.isoformat(),
                    message=outcome.message,
                    errors=[f"{f.url}: {f.error}" for f in outcome.failures],
                )
            issue = outcome

            stage = "merge"
            merged = self.merger.merge(issue.units)

            images = None
            if self.settings.generate_images:
                stage = "images"
                rasterizer = self.rasterizer or build_rasterizer(
                    self.settings.rasterizer,
                    dpi=self.settings.dpi,
                    quality=self.settings.image_quality,
                )
                images = rasterizer.rasterize(merged.content, merged.page_count)

            stage = "text"
            pages = self.resolver.resolve(
                issue, [image.name for image in images] if images else None
            )

            stage = "alto"
            alto_docs = self.alto_generator.generate(pages)

            stage = "mets"
            mets = self.mets_generator.generate(issue, alto_docs, images)

            stage = "package"
            bundle = self.writer.bundle(name, merged.content, mets, alto_docs, images)

        except (ArchiverError, ValueError) as e:
            logger.error(f"Assembly of {name} failed at stage {stage}: {e}")
            return AssemblyResult(
                ok=False,
                issue_name=name,
                issue_date=issue_date.isoformat(),
                message=f"Failed at stage {stage}: {e}",
                stage=stage,
                errors=[str(e)],
            )

        message = f"Assembled {issue.total_pages} pages from {len(issue.units)} units"
        if issue.failures:
            message += f" ({len(issue.failures)} captures failed)"
        logger.info(f"{name}: {message}")

        return AssemblyResult(
            ok=True,
            issue_name=name,
            issue_date=issue_date.isoformat(),
            message=message,
            errors=[f"{f.url}: {f.error}" for f in issue.failures],
            total_pages=issue.total_pages,
            bundle=bundle,
        )
