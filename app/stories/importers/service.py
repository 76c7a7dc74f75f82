import structlog

from app.auth import CurrentUser
from app.config import settings
from app.exceptions import PersistenceError, RowValidationError, ValidationError
from app.stories.importers.normalizer import RowNormalizer
from app.stories.importers.parser import decode_content, parse_csv
from app.stories.importers.schemas import (
    ImportOutcome,
    ImportReport,
    Imported,
    NormalizedRow,
    RawRow,
    Rejected,
)
from app.stories.importers.validator import validate_row
from app.stories.models import ApprovalStatus, UserRole
from app.stories.repository import StoryRepository

logger = structlog.get_logger()


def approval_status_for(role: UserRole) -> ApprovalStatus:
    """Admin imports are approved on arrival; everyone else's wait for review."""
    return ApprovalStatus.approved if role == UserRole.admin else ApprovalStatus.pending


class ImportService:
    def __init__(self, repo: StoryRepository, max_rows: int | None = None) -> None:
        self._repo = repo
        self._max_rows = max_rows if max_rows is not None else settings.import_max_rows

    async def import_csv(
        self, file_content: bytes, filename: str, user: CurrentUser
    ) -> ImportReport:
        """Import stories from an uploaded CSV file."""
        if not filename.lower().endswith(".csv"):
            raise ValidationError("File must have .csv extension")
        if len(file_content) > settings.import_max_bytes:
            raise ValidationError(
                f"File exceeds the {settings.import_max_bytes} byte upload limit"
            )

        logger.info(
            "csv_import_started",
            filename=filename,
            size=len(file_content),
            user_id=user.id,
            role=user.role,
        )
        return await self.import_text(decode_content(file_content), filename, user)

    async def import_text(self, text: str, filename: str, user: CurrentUser) -> ImportReport:
        """Run every row through normalize, validate and persist, in file order.

        Only an unreadable file raises (ParseError); per-row failures end up in
        the report.
        """
        parsed = parse_csv(text)
        normalizer = RowNormalizer(parsed.headers)
        approval_status = approval_status_for(user.role)
        report = ImportReport(approval_status=approval_status)

        for raw in parsed.rows:
            if report.total >= self._max_rows:
                outcome: ImportOutcome = Rejected(
                    row=raw.row_number,
                    title=None,
                    reason=f"row limit of {self._max_rows} exceeded",
                )
                warnings: list[str] = []
            else:
                outcome, warnings = await self.process_row(
                    raw, normalizer, approval_status, user.id
                )

            for message in warnings:
                report.warn(outcome.row, outcome.title, message)
            report.record(outcome)

        logger.info(
            "csv_import_completed",
            filename=filename,
            total=report.total,
            imported=report.imported,
            rejected=report.rejected,
            warnings=len(report.warnings),
            approval_status=approval_status,
        )
        return report

    async def process_row(
        self,
        raw: RawRow,
        normalizer: RowNormalizer,
        approval_status: ApprovalStatus,
        uploaded_by: str,
    ) -> tuple[ImportOutcome, list[str]]:
        """Turn one RawRow into exactly one outcome. Never raises."""
        if raw.error is not None:
            logger.info("csv_row_rejected", row=raw.row_number, title=None, reason=raw.error)
            return Rejected(row=raw.row_number, title=None, reason=raw.error), []

        normalized: NormalizedRow | None = None
        try:
            normalized = normalizer.normalize(raw)
            validate_row(normalized)
            story_id = await self._repo.insert(normalized.story, approval_status, uploaded_by)
        except (RowValidationError, PersistenceError) as exc:
            rejected = Rejected(
                row=raw.row_number, title=self._title_of(normalized), reason=exc.message
            )
            logger.info(
                "csv_row_rejected", row=rejected.row, title=rejected.title, reason=rejected.reason
            )
            return rejected, self._warnings_of(normalized)
        except Exception as exc:
            rejected = Rejected(
                row=raw.row_number,
                title=self._title_of(normalized),
                reason=str(exc) or type(exc).__name__,
            )
            logger.warning(
                "csv_row_failed",
                row=rejected.row,
                title=rejected.title,
                error=rejected.reason,
                exc_info=True,
            )
            return rejected, self._warnings_of(normalized)

        title = normalized.story.title
        logger.debug("csv_row_imported", row=raw.row_number, story_id=story_id, title=title)
        return Imported(row=raw.row_number, story_id=story_id, title=title), normalized.warnings

    @staticmethod
    def _title_of(normalized: NormalizedRow | None) -> str | None:
        if normalized is None:
            return None
        return normalized.story.title.strip() or None

    @staticmethod
    def _warnings_of(normalized: NormalizedRow | None) -> list[str]:
        return normalized.warnings if normalized is not None else []
