"""Domain entity — the user's search/filter/page selection on a screen."""

from dataclasses import dataclass, replace

from admin_sync.domain.exceptions import ValidationFailure

ALL_STATUSES = "all"
DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class FilterState:
    """Search term, status filter, created-date period and page of one screen.

    Independent of the collection: a refresh must hand it back unchanged
    (only ``page`` may be clamped when the collection shrank).
    """

    search_term: str = ""
    status_filter: str = ALL_STATUSES
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    created_month: int | None = None  # 1-12
    created_year: int | None = None

    def __post_init__(self) -> None:
        errors: list[str] = []
        if self.page < 1:
            errors.append(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            errors.append(f"page_size must be >= 1, got {self.page_size}")
        if self.created_month is not None and not 1 <= self.created_month <= 12:
            errors.append(f"created_month must be 1-12, got {self.created_month}")
        if errors:
            raise ValidationFailure("Invalid filter state", errors)

    @property
    def has_period(self) -> bool:
        return self.created_month is not None and self.created_year is not None

    def with_page(self, page: int) -> "FilterState":
        return replace(self, page=page)

    def with_search(self, term: str) -> "FilterState":
        return replace(self, search_term=term, page=1)

    def with_status(self, status: str) -> "FilterState":
        return replace(self, status_filter=status or ALL_STATUSES, page=1)

    def with_period(self, month: int | None, year: int | None) -> "FilterState":
        return replace(self, created_month=month, created_year=year, page=1)
