from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(key_func=get_remote_address)

# Applied to the heavier admin listing queries
admin_rate_limit = f"{settings.rate_limit_per_minute}/minute"
