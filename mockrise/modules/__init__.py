"""Domain modules package."""

from mockrise.modules.availability import models as availability_models  # noqa: F401
from mockrise.modules.booking import models as booking_models  # noqa: F401
from mockrise.modules.identity import models as identity_models  # noqa: F401
from mockrise.modules.notifications import models as notifications_models  # noqa: F401
from mockrise.modules.outbox import models as outbox_models  # noqa: F401
