from app.models.activity_log import ActivityLog  # noqa: F401
from app.models.exam import Exam, ExamStatus  # noqa: F401
from app.models.notification import Notification, NotificationType  # noqa: F401
from app.models.pending_change import ChangeType, PendingChange  # noqa: F401
from app.models.user import User, UserRole  # noqa: F401
