"""Activation policy for operations that touch GitHub."""

from dataclasses import dataclass

from statusbot.config import AuthContext


@dataclass(frozen=True)
class ActivationGate:
    """Open only inside CI with credentials available.

    A closed gate turns every public operation into a silent no-op, so the
    reporter can run on developer machines and forks without a token.
    """

    is_ci: bool
    auth: AuthContext

    @property
    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated

    @property
    def is_open(self) -> bool:
        return self.is_ci and self.is_authenticated
