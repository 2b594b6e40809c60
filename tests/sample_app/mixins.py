class TimestampsMixin:
    def touch(self) -> None:
        self.touched = True


class AuditMixin(TimestampsMixin):
    def audit(self) -> list:
        return []


class SoftDeletesMixin:
    def trash(self) -> None:
        self.trashed = True
