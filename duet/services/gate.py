"""Gate checks: the shared passphrase and the two-address allow-list."""

from duet.config import get_settings


class GateService:
    """Stateless checks against environment configuration."""

    def validate_passphrase(self, candidate: str | None) -> bool:
        """Plain equality against the configured passphrase. An unset passphrase never matches."""
        expected = get_settings().SHARED_PASSWORD
        return bool(expected) and candidate == expected

    def validate_email(self, candidate: str | None) -> bool:
        """Exact membership in the allow-list."""
        return candidate is not None and candidate in get_settings().allowed_emails


_gate_service: GateService | None = None


def get_gate_service() -> GateService:
    """Get singleton gate service instance."""
    global _gate_service
    if _gate_service is None:
        _gate_service = GateService()
    return _gate_service
