"""Document Models (Documents, Versions, Feedback, Tags)"""

from sqlalchemy import (
    Column, String, Text, Integer, BigInteger, Boolean, Float, Enum, ForeignKey, Table, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import relationship

from study_portal.models.base import BaseModel
from study_portal.models.enums import DocumentType, FeedbackType


class Document(BaseModel):
    """
    Uploaded study material owned by its uploader.
    average_rating / total_ratings are recomputed after every feedback write.
    """
    __tablename__ = "documents"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    mime_type = Column(String(100), nullable=False)
    type = Column(Enum(DocumentType, name="document_type"), default=DocumentType.OTHER, nullable=False, index=True)

    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="RESTRICT"), nullable=False, index=True)
    uploader_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    is_shared = Column(Boolean, default=False, nullable=False, index=True)
    allow_peer_feedback = Column(Boolean, default=True, nullable=False)

    # Aggregates
    download_count = Column(Integer, default=0, nullable=False)
    average_rating = Column(Float, default=0.0, nullable=False)
    total_ratings = Column(Integer, default=0, nullable=False)

    # Relationships
    subject = relationship("Subject", back_populates="documents")
    uploader = relationship("User", back_populates="documents")
    versions = relationship(
        "DocumentVersion",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentVersion.version",
    )
    feedback = relationship("Feedback", back_populates="document", cascade="all, delete-orphan")
    tags = relationship("Tag", secondary="document_tags", back_populates="documents")
    assignments = relationship("Assignment", secondary="assignment_documents", back_populates="documents")

    def __repr__(self) -> str:
        return f"<Document {self.title}>"


class DocumentVersion(BaseModel):
    """Append-only file history; version numbers increase per document"""
    __tablename__ = "document_versions"
    __table_args__ = (
        UniqueConstraint("document_id", "version", name="uq_document_version"),
    )

    document_id = Column(Uuid, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    version = Column(Integer, nullable=False)
    file_name = Column(String(255), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    changes = Column(Text, nullable=True)

    document = relationship("Document", back_populates="versions")


class Feedback(BaseModel):
    """One rating/comment per (document, author) pair"""
    __tablename__ = "feedback"
    __table_args__ = (
        UniqueConstraint("document_id", "author_id", name="uq_feedback_author"),
    )

    document_id = Column(Uuid, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    rating = Column(Integer, nullable=False)  # 1..5
    comment = Column(Text, nullable=True)
    type = Column(Enum(FeedbackType, name="feedback_type"), nullable=False)

    document = relationship("Document", back_populates="feedback")
    author = relationship("User", foreign_keys=[author_id])


class Tag(BaseModel):
    """Free-form document label"""
    __tablename__ = "tags"

    name = Column(String(100), unique=True, nullable=False, index=True)

    documents = relationship("Document", secondary="document_tags", back_populates="tags")

    def __repr__(self) -> str:
        return f"<Tag {self.name}>"


# Association table for Document <-> Tag
document_tags = Table(
    "document_tags",
    BaseModel.metadata,
    Column("document_id", Uuid, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)
