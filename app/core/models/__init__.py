from app.core.models.document import StoredDocument
