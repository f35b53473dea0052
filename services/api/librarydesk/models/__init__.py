from librarydesk.models.base import Base
from librarydesk.models.book import Book
from librarydesk.models.borrowing_record import BorrowingRecord, LoanStatus
from librarydesk.models.member import Member, MemberStatus


__all__ = [
    "Base",
    "Book",
    "Member",
    "MemberStatus",
    "BorrowingRecord",
    "LoanStatus",
]
