from .models import BonusUseRecord, User

__all__ = ["BonusUseRecord", "User"]
