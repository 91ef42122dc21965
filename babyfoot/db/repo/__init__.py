from babyfoot.db.repo.documents_repo import DocumentsRepo

__all__ = ["DocumentsRepo"]
