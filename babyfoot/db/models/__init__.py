from babyfoot.db.models.base import Base
from babyfoot.db.models.documents import DocumentRow

__all__ = ["Base", "DocumentRow"]
