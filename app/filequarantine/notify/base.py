"""Abstract base class for report notifiers."""

from abc import ABC, abstractmethod

from filequarantine.quarantine.report import RunReport


class Notifier(ABC):
    """Delivers a finished run report somewhere.

    Delivery problems are reported through the return value, never
    raised, so a failed notification cannot abort or repeat a run.
    """

    @abstractmethod
    def deliver(self, report: RunReport) -> bool:
        """Deliver the report.

        Args:
            report: The finished run report.

        Returns:
            True if the report was handed off successfully.
        """
