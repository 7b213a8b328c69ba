"""ORM models. Importing this package registers every table on Base.metadata."""

from duet.models.account import Account
from duet.models.reaction import Reaction
from duet.models.recording import Recording
from duet.models.user_status import UserStatus

__all__ = ["Account", "Recording", "Reaction", "UserStatus"]
