from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid4

from core.models.image import PackageApplicability, PackageResult


class WorkflowStatus(Enum):
    """Overall run status."""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ServicingResult:
    """Result of one offline patching run."""

    run_id: str = field(default_factory=lambda: str(uuid4()))
    status: WorkflowStatus = WorkflowStatus.PENDING

    # Timing
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    # Inputs discovered
    updates_found: int = 0
    packages_resolved: int = 0

    # Session
    confirmed: bool = True
    committed: bool = False
    package_results: List[PackageResult] = field(default_factory=list)

    # Error tracking
    error_message: Optional[str] = None

    @property
    def duration(self) -> Optional[timedelta]:
        """Calculate run duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return None

    @property
    def applied_count(self) -> int:
        return len([r for r in self.package_results if r.success])

    @property
    def failed_count(self) -> int:
        return len([r for r in self.package_results if r.is_failed])

    @property
    def skipped_counts(self) -> Dict[PackageApplicability, int]:
        """Count skipped packages per classification."""
        counts: Dict[PackageApplicability, int] = {}
        for result in self.package_results:
            if result.is_skipped and result.applicability:
                counts[result.applicability] = counts.get(result.applicability, 0) + 1
        return counts

    def mark_started(self) -> None:
        """Mark run as started."""
        self.status = WorkflowStatus.RUNNING
        self.start_time = datetime.utcnow()

    def mark_completed(self) -> None:
        """Mark run as completed."""
        self.status = WorkflowStatus.COMPLETED
        self.end_time = datetime.utcnow()

    def mark_failed(self, error: str) -> None:
        """Mark run as failed."""
        self.status = WorkflowStatus.FAILED
        self.end_time = datetime.utcnow()
        self.error_message = error
