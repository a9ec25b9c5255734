from __future__ import annotations

from base import get_logger
from features.common.validation import ValidationError, require_fields, require_iso_date
from features.store import Notice, NoticeType, RecordStore

logger = get_logger(__name__)


class NoticeService:
    def __init__(self, store: RecordStore):
        self.store = store

    def list_notices(self) -> list[Notice]:
        return self.store.get_notices()

    def post_notice(
        self,
        title: str,
        content: str,
        date: str,
        type: NoticeType | str = NoticeType.HOLIDAY,
    ) -> Notice:
        require_fields(title=title, content=content, date=date)
        require_iso_date("date", date)
        try:
            notice_type = NoticeType(type)
        except ValueError:
            raise ValidationError(f"Unknown notice type: {type}", ["type"])

        notice = self.store.add_notice(title.strip(), content.strip(), date, notice_type)
        logger.info(f"Posted notice {notice.id}: {notice.title}")
        return notice

    def delete_notice(self, notice_id: str) -> bool:
        deleted = self.store.delete_notice(notice_id)
        if deleted:
            logger.info(f"Deleted notice {notice_id}")
        return deleted
