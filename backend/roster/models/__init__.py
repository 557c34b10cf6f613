from .personnel import User, Unit
from .auth import SessionToken, LoginAttempt
from .duty import DutyLog
from .disciplinary import DisciplinaryRecord
from .promotions import Promotion
from .merit import MeritPointTransaction
from .missions import Mission
from .awards import Award, UserAward
from .audit import AuditLog

__all__ = [
    'User', 'Unit',
    'SessionToken', 'LoginAttempt',
    'DutyLog',
    'DisciplinaryRecord',
    'Promotion',
    'MeritPointTransaction',
    'Mission',
    'Award', 'UserAward',
    'AuditLog',
]
