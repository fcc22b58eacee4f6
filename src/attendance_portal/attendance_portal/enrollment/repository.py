from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StudentEnrollment


class EnrollmentRepository(Protocol):
    def get_by_student(self, student_id: int) -> Optional[StudentEnrollment]:
        raise NotImplementedError

    def list_for_class(self, class_id: int, *, batch_id: Optional[int] = None) -> Sequence[StudentEnrollment]:
        """Active students of a class (optionally one batch), ordered by roll number."""

        raise NotImplementedError
